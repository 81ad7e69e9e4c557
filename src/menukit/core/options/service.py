# どこで: `src/menukit/core/options/service.py`。
# 何を: OptionNode の登録/解除と、custom id / numeric id による option 解決、プレイヤー別の値の型付き取得を提供する。
# なぜ: numeric id の採番・transport への送出・値の読み出しを 1 つの入口へ集約するため。

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from .extraction import extract_value, has_extractor
from .identifiers import OptionIdentifiersRegistry
from .models import Option, OptionNode
from .setting import ClientSettingState, SettingDefinition
from .value_type import OptionValueType

from menukit.core.errors import (
    InternalConsistencyError,
    OptionNotFoundError,
    OptionValidationError,
    ReturnTypeMismatchError,
    SettingValueUnavailableError,
)

PlayerPredicate = Callable[[Any], bool]

_logger = logging.getLogger(__name__)


class SettingsTransport(Protocol):
    """option をクライアントへ届け、プレイヤー別の現在値を保持する transport の契約。"""

    def send(
        self, settings: Sequence[SettingDefinition], predicate: PlayerPredicate | None = None
    ) -> None: ...

    def send_to(self, player: Any, settings: Sequence[SettingDefinition]) -> None: ...

    def retract(
        self, settings: Sequence[SettingDefinition], predicate: PlayerPredicate | None = None
    ) -> None: ...

    def retract_from(self, player: Any, settings: Sequence[SettingDefinition]) -> None: ...

    def try_get_state(self, player: Any, numeric_id: int) -> ClientSettingState | None: ...


class OptionsService:
    """今のセッションで登録された option を保持し、登録・解決・値の取得を行う。

    Parameters
    ----------
    registry : OptionIdentifiersRegistry
        custom id -> numeric id の採番元。
    transport : SettingsTransport
        送出先、兼、プレイヤー別現在値の保持者。

    Notes
    -----
    - 同じ option オブジェクトを再登録してもセッションリストへは 1 度しか積まない。
    - custom id が同じ別オブジェクトは両方積む（numeric id は同じになる）。検索は先勝ち。
    """

    def __init__(
        self,
        *,
        registry: OptionIdentifiersRegistry,
        transport: SettingsTransport,
    ) -> None:
        self._registry = registry
        self._transport = transport
        self._options: list[Option] = []

    @property
    def registry(self) -> OptionIdentifiersRegistry:
        return self._registry

    @property
    def options(self) -> tuple[Option, ...]:
        """登録済み option を登録順で返す。"""

        return tuple(self._options)

    # --- 登録 / 解除 ---
    def register(self, node: OptionNode | None, predicate: PlayerPredicate | None = None) -> None:
        """node を登録し、predicate を満たすプレイヤーへ送る（None なら全員）。

        Raises
        ------
        OptionValidationError
            node が None（または OptionNode でない）場合。
        """

        settings = self._build_settings(node)
        self._transport.send(settings, predicate)

    def register_for_player(self, node: OptionNode | None, player: Any) -> None:
        """node を登録し、接続済みの player 1 人だけへ送る（途中参加者向け）。"""

        settings = self._build_settings(node)
        self._transport.send_to(player, settings)

    def unregister(self, node: OptionNode | None, predicate: PlayerPredicate | None = None) -> None:
        """node の option を predicate を満たすプレイヤーから取り下げる（None なら全員）。

        predicate=None の場合は、対象 option をセッションリストからも外す。
        未登録の option は黙って飛ばす。
        """

        settings = self._known_settings(node, forget=predicate is None)
        self._transport.retract(settings, predicate)

    def unregister_for_player(self, node: OptionNode | None, player: Any) -> None:
        """node の option を player 1 人から取り下げる。セッションリストには残す。"""

        settings = self._known_settings(node, forget=False)
        self._transport.retract_from(player, settings)

    # --- 解決 ---
    def get(self, custom_id: str) -> Option | None:
        """custom id で option を返す。無ければ None。"""

        for option in self._options:
            if option.custom_id == custom_id:
                return option
        return None

    def get_by_id(self, numeric_id: int) -> Option | None:
        """numeric id で option を返す。無ければ None。"""

        for option in self._options:
            if option.numeric_id == numeric_id:
                return option
        return None

    # --- 値の取得 ---
    def get_string_value(self, player: Any, custom_id: str) -> str:
        """dropdown の選択中エントリ / text input の入力文字列を返す。"""

        return str(self._read_value(player, custom_id, OptionValueType.STRING))

    def get_number_value(self, player: Any, custom_id: str) -> float:
        """slider の現在値を返す。"""

        return float(self._read_value(player, custom_id, OptionValueType.NUMBER))

    def get_boolean_value(self, player: Any, custom_id: str) -> bool:
        """two buttons で 1 つ目が選ばれていれば True を返す。"""

        return bool(self._read_value(player, custom_id, OptionValueType.BOOLEAN))

    def _read_value(self, player: Any, custom_id: str, expected: OptionValueType) -> Any:
        option = self.get(custom_id)
        if option is None:
            raise OptionNotFoundError(f"custom id {custom_id!r} の option は登録されていません")
        if option.returnable_type is not expected:
            raise ReturnTypeMismatchError(
                f"option {custom_id!r} は {option.returnable_type.value} を返します"
                f"（要求: {expected.value}）"
            )
        if not has_extractor(option.kind):
            raise InternalConsistencyError(
                f"{type(option).__name__} の値を取り出す処理が実装されていません"
            )

        state = self._transport.try_get_state(player, option.numeric_id)
        if state is None:
            raise SettingValueUnavailableError(
                f"option {custom_id!r} の値はまだ届いていません: player={player!r}"
            )
        return extract_value(option.kind, expected, state)

    # --- 内部 ---
    def _build_settings(self, node: OptionNode | None) -> list[SettingDefinition]:
        """option に numeric id を割り当て、セッションリストへ積み、送出用の定義列を返す。"""

        node = _check_node(node)

        # node 全体の採番と定義の組み立てが通るまでセッションリストは触らない。
        numeric_ids = [self._registry.register(option.custom_id) for option in node.options]

        settings = [node.to_setting()]
        for option, numeric_id in zip(node.options, numeric_ids):
            option.numeric_id = numeric_id
            settings.append(option.to_setting())
        for option in node.options:
            if not any(known is option for known in self._options):
                self._options.append(option)
        _logger.debug("node %r を登録しました: options=%d", node.header, len(node.options))
        return settings

    def _known_settings(self, node: OptionNode | None, *, forget: bool) -> list[SettingDefinition]:
        """node の option のうち登録済みのものの定義列（末尾にヘッダ）を返す。"""

        node = _check_node(node)

        settings: list[SettingDefinition] = []
        for option in node.options:
            found = self.get(option.custom_id)
            if found is None:
                continue
            settings.append(found.to_setting())
            if forget:
                self._options = [o for o in self._options if o.custom_id != option.custom_id]
        settings.append(node.to_setting())
        return settings


def _check_node(node: object) -> OptionNode:
    if node is None:
        raise OptionValidationError("node は None にできません")
    if not isinstance(node, OptionNode):
        raise OptionValidationError(f"node は OptionNode である必要があります: got={type(node).__name__}")
    return node


__all__ = ["OptionsService", "PlayerPredicate", "SettingsTransport"]
