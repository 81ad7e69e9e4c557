# どこで: `src/menukit/core/options/setting.py`。
# 何を: transport とやり取りする設定定義（SettingDefinition）とプレイヤー別の現在値（ClientSettingState）を定義する。
# なぜ: core を transport 実装に依存させず、送出物と受信値の形だけを共有するため。

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .value_type import OptionKind


@dataclass(frozen=True, slots=True)
class SettingDefinition:
    """クライアントへ送る 1 行分の設定定義。

    ヘッダ（OptionNode）は numeric_id=None とする。
    """

    numeric_id: int | None
    kind: OptionKind
    label: str
    hint: str | None = None
    payload: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(slots=True)
class ClientSettingState:
    """プレイヤー 1 人・設定 1 つぶんの現在値。

    value の中身は kind ごとに決まる:
    - dropdown: 選択中エントリの index（int）
    - text_input: 入力文字列（str）
    - slider: 数値（float）
    - two_buttons: 1 つ目が選ばれているか（bool）
    - keybind: 押下中か（bool）
    - button / text_area: None
    """

    definition: SettingDefinition
    value: Any = None

    @property
    def numeric_id(self) -> int | None:
        return self.definition.numeric_id

    @property
    def kind(self) -> OptionKind:
        return self.definition.kind


__all__ = ["ClientSettingState", "SettingDefinition"]
