# どこで: `src/menukit/interactive/settings_sync.py`。
# 何を: 設定定義の送出と、クライアントから届いた値のプレイヤー別保持を行うインメモリ transport を提供する。
# なぜ: ホスト側の同期層を core から切り離し、登録 → 値受信 → 取得の流れをヘッドレスに再現するため。

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from menukit.core.options.setting import ClientSettingState, SettingDefinition
from menukit.core.options.value_type import OptionKind

DefinedSettingsListener = Callable[[tuple[SettingDefinition, ...]], None]
ValueReceivedListener = Callable[["Player", int], None]

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Player:
    """接続中のクライアント 1 人。"""

    player_id: int
    nickname: str = ""


def _definition_key(definition: SettingDefinition) -> object:
    if definition.numeric_id is None:
        return ("header", definition.label)
    return definition.numeric_id


def initial_client_value(definition: SettingDefinition) -> Any:
    """定義を受け取った直後（値が届く前）のクライアント側既定値を返す。"""

    payload = definition.payload
    kind = definition.kind
    if kind is OptionKind.DROPDOWN:
        return int(payload.get("default_option_index", 0))
    if kind is OptionKind.TEXT_INPUT:
        return ""
    if kind is OptionKind.SLIDER:
        return float(payload.get("default_value", 0.0))
    if kind is OptionKind.TWO_BUTTONS:
        return not bool(payload.get("is_second_default", False))
    if kind is OptionKind.KEYBIND:
        return False
    return None


def normalize_client_value(definition: SettingDefinition, value: Any) -> tuple[Any | None, str | None]:
    """kind に応じてクライアント入力を正規化し、(正規化値, エラー種別) を返す。"""

    payload = definition.payload
    kind = definition.kind

    if kind in (OptionKind.TWO_BUTTONS, OptionKind.KEYBIND):
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in {"true", "1", "on", "yes"}:
                return True, None
            if lowered in {"false", "0", "off", "no"}:
                return False, None
            return None, "invalid_bool"
        return bool(value), None

    if kind is OptionKind.DROPDOWN:
        choices = list(payload.get("options", ()))
        if isinstance(value, bool):
            return None, "invalid_choice"
        if isinstance(value, int):
            if 0 <= value < len(choices):
                return int(value), None
            return None, "choice_out_of_range"
        text = str(value)
        if text in choices:
            return choices.index(text), None
        return None, "invalid_choice"

    if kind is OptionKind.SLIDER:
        try:
            number = float(value)
        except Exception:
            return None, "invalid_float"
        lo = float(payload.get("min_value", number))
        hi = float(payload.get("max_value", number))
        number = max(lo, min(hi, number))
        if bool(payload.get("is_integer", False)):
            number = float(round(number))
        return number, None

    if kind is OptionKind.TEXT_INPUT:
        if value is None:
            return "", None
        text = str(value)
        limit = int(payload.get("character_limit", 0))
        if limit > 0 and len(text) > limit:
            text = text[:limit]
        return text, None

    # button / text_area / header は値を持たない
    return None, None


class ServerSettingsSync:
    """ホスト側の設定同期層（インメモリ実装）。

    - `defined_settings`: ホスト自身が定義した設定（numeric id 空間の既存利用分）。
    - プレイヤーごとに「送出済み定義」と「現在値」を保持する。
    - `receive_value()` で届いた値を正規化して保持し、リスナーへ `(player, numeric_id)` を通知する。
    """

    def __init__(self, defined_settings: Iterable[SettingDefinition] = ()) -> None:
        self._defined: tuple[SettingDefinition, ...] = tuple(defined_settings)
        self._players: list[Player] = []
        self._visible: dict[Player, dict[object, SettingDefinition]] = {}
        self._states: dict[tuple[Player, int], ClientSettingState] = {}
        self.defined_settings_listeners: list[DefinedSettingsListener] = []
        self.value_received_listeners: list[ValueReceivedListener] = []

    # --- ホスト定義 ---
    @property
    def defined_settings(self) -> tuple[SettingDefinition, ...]:
        return self._defined

    def defined_numeric_ids(self) -> list[int]:
        """ホスト定義の numeric id を返す（ヘッダは除く）。"""

        return [d.numeric_id for d in self._defined if d.numeric_id is not None]

    def define_settings(self, settings: Iterable[SettingDefinition]) -> None:
        """ホスト定義を丸ごと置き換え、リスナーへ通知する。"""

        self._defined = tuple(settings)
        for listener in list(self.defined_settings_listeners):
            listener(self._defined)

    # --- 接続 ---
    @property
    def players(self) -> tuple[Player, ...]:
        return tuple(self._players)

    def connect(self, player: Player) -> None:
        if player in self._visible:
            return
        self._players.append(player)
        self._visible[player] = {}

    def disconnect(self, player: Player) -> None:
        if player not in self._visible:
            return
        self._players.remove(player)
        del self._visible[player]
        for key in [k for k in self._states if k[0] == player]:
            del self._states[key]

    def visible_settings(self, player: Player) -> tuple[SettingDefinition, ...]:
        """player へ送出済みの定義を送出順で返す。"""

        return tuple(self._require_player(player).values())

    # --- 送出 / 取り下げ ---
    def send(
        self,
        settings: Sequence[SettingDefinition],
        predicate: Callable[[Player], bool] | None = None,
    ) -> None:
        for player in self._targets(predicate):
            self.send_to(player, settings)

    def send_to(self, player: Player, settings: Sequence[SettingDefinition]) -> None:
        visible = self._require_player(player)
        for definition in settings:
            visible[_definition_key(definition)] = definition
            if definition.numeric_id is None:
                continue
            key = (player, definition.numeric_id)
            state = self._states.get(key)
            if state is None or state.kind is not definition.kind:
                self._states[key] = ClientSettingState(
                    definition=definition, value=initial_client_value(definition)
                )
            else:
                state.definition = definition

    def retract(
        self,
        settings: Sequence[SettingDefinition],
        predicate: Callable[[Player], bool] | None = None,
    ) -> None:
        for player in self._targets(predicate):
            self.retract_from(player, settings)

    def retract_from(self, player: Player, settings: Sequence[SettingDefinition]) -> None:
        visible = self._require_player(player)
        for definition in settings:
            visible.pop(_definition_key(definition), None)
            if definition.numeric_id is not None:
                self._states.pop((player, definition.numeric_id), None)

    # --- 値 ---
    def try_get_state(self, player: Player, numeric_id: int) -> ClientSettingState | None:
        return self._states.get((player, int(numeric_id)))

    def receive_value(self, player: Player, numeric_id: int, value: Any = None) -> bool:
        """クライアントから届いた値を保持し、リスナーへ通知する。保持できたら True を返す。"""

        numeric_id = int(numeric_id)
        state = self._states.get((player, numeric_id))
        if state is None:
            definition = self._find_defined(numeric_id)
            if definition is None or player not in self._visible:
                _logger.warning(
                    "未送出の設定への値を無視しました: player=%r id=%d", player, numeric_id
                )
                return False
            state = ClientSettingState(definition=definition, value=initial_client_value(definition))
            self._states[(player, numeric_id)] = state

        normalized, err = normalize_client_value(state.definition, value)
        if err is not None:
            _logger.warning(
                "不正な値を無視しました: player=%r id=%d value=%r err=%s",
                player,
                numeric_id,
                value,
                err,
            )
            return False
        state.value = normalized

        for listener in list(self.value_received_listeners):
            listener(player, numeric_id)
        return True

    # --- 内部 ---
    def _targets(self, predicate: Callable[[Player], bool] | None) -> list[Player]:
        if predicate is None:
            return list(self._players)
        return [p for p in self._players if predicate(p)]

    def _require_player(self, player: Player) -> dict[object, SettingDefinition]:
        visible = self._visible.get(player)
        if visible is None:
            raise ValueError(f"player は接続されていません: {player!r}")
        return visible

    def _find_defined(self, numeric_id: int) -> SettingDefinition | None:
        for definition in self._defined:
            if definition.numeric_id == numeric_id:
                return definition
        return None


__all__ = [
    "DefinedSettingsListener",
    "Player",
    "ServerSettingsSync",
    "ValueReceivedListener",
    "initial_client_value",
    "normalize_client_value",
]
