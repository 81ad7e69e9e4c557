# どこで: `src/menukit/core/options/models.py`。
# 何を: 設定メニューに並ぶ option 各種と、それらを束ねる OptionNode を定義する。
# なぜ: 表示属性・検証・transport 向け定義への変換を、option の種類ごとに 1 箇所へ閉じるため。

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar

from .setting import SettingDefinition
from .value_type import OptionKind, OptionValueType

# player はホスト側のプレイヤーオブジェクト（transport 依存）なので Any で受ける。
ValueReceivedHandler = Callable[[Any, "Option"], None]


def _is_blank(text: str | None) -> bool:
    return text is None or not str(text).strip()


@dataclass(kw_only=True, eq=False)
class Option(ABC):
    """設定メニュー 1 行分の option の基底クラス。

    Notes
    -----
    - kind / returnable_type は具象クラスごとに固定（インスタンスで変えない）。
    - numeric_id は登録時に OptionsService が埋める。未登録の間は 0。
    """

    kind: ClassVar[OptionKind]
    returnable_type: ClassVar[OptionValueType] = OptionValueType.NONE

    custom_id: str
    label: str
    hint: str | None = None
    numeric_id: int = 0

    def validate(self) -> bool:
        """必須フィールドが揃っていれば True を返す。"""

        return not _is_blank(self.custom_id) and not _is_blank(self.label)

    def to_setting(self) -> SettingDefinition:
        """transport へ渡す SettingDefinition を返す。"""

        return SettingDefinition(
            numeric_id=int(self.numeric_id),
            kind=self.kind,
            label=str(self.label),
            hint=self.hint,
            payload=MappingProxyType(self._payload()),
        )

    @property
    def value_received_handler(self) -> ValueReceivedHandler | None:
        """値受信時に呼ぶハンドラを返す。受け付けない種類なら None。"""

        return None

    @abstractmethod
    def _payload(self) -> dict[str, Any]: ...


@dataclass(kw_only=True, eq=False)
class ButtonOption(Option):
    """押下できるボタン。"""

    kind: ClassVar[OptionKind] = OptionKind.BUTTON

    text: str = ""
    hold_time: float = 0.0
    on_clicked: Callable[[Any, ButtonOption], None] | None = field(default=None, repr=False)

    def validate(self) -> bool:
        return super().validate() and not _is_blank(self.text) and float(self.hold_time) >= 0.0

    def _payload(self) -> dict[str, Any]:
        return {"text": str(self.text), "hold_time": float(self.hold_time)}


@dataclass(kw_only=True, eq=False)
class KeybindOption(Option):
    """キー割り当て。"""

    kind: ClassVar[OptionKind] = OptionKind.KEYBIND

    suggested_key: str = "none"
    prevent_interaction_on_gui: bool = False
    on_pressed: Callable[[Any, KeybindOption], None] | None = field(default=None, repr=False)

    def _payload(self) -> dict[str, Any]:
        return {
            "suggested_key": str(self.suggested_key),
            "prevent_interaction_on_gui": bool(self.prevent_interaction_on_gui),
        }


@dataclass(kw_only=True, eq=False)
class DropdownOption(Option):
    """選択肢から 1 つ選ぶドロップダウン。値は選択中エントリの文字列。"""

    kind: ClassVar[OptionKind] = OptionKind.DROPDOWN
    returnable_type: ClassVar[OptionValueType] = OptionValueType.STRING

    options: list[str] = field(default_factory=list)
    default_option_index: int = 0
    entry_type: str = "regular"  # "regular" | "scrollable" | "scrollable_loop"
    on_changed: Callable[[Any, Any], None] | None = field(default=None, repr=False)
    on_value_received: ValueReceivedHandler | None = field(default=None, repr=False)

    def validate(self) -> bool:
        return (
            super().validate()
            and len(self.options) > 0
            and 0 <= int(self.default_option_index) < len(self.options)
        )

    @property
    def value_received_handler(self) -> ValueReceivedHandler | None:
        return self.on_value_received

    def _payload(self) -> dict[str, Any]:
        return {
            "options": tuple(str(o) for o in self.options),
            "default_option_index": int(self.default_option_index),
            "entry_type": str(self.entry_type),
        }


@dataclass(kw_only=True, eq=False)
class TextInputOption(Option):
    """自由入力テキスト欄。値は入力文字列。"""

    kind: ClassVar[OptionKind] = OptionKind.TEXT_INPUT
    returnable_type: ClassVar[OptionValueType] = OptionValueType.STRING

    placeholder: str = ""
    character_limit: int = 64
    content_type: str = "standard"
    on_value_received: ValueReceivedHandler | None = field(default=None, repr=False)

    def validate(self) -> bool:
        return super().validate() and int(self.character_limit) >= 0

    @property
    def value_received_handler(self) -> ValueReceivedHandler | None:
        return self.on_value_received

    def _payload(self) -> dict[str, Any]:
        return {
            "placeholder": str(self.placeholder),
            "character_limit": int(self.character_limit),
            "content_type": str(self.content_type),
        }


@dataclass(kw_only=True, eq=False)
class TextAreaOption(Option):
    """表示専用のテキストエリア。値は返さない。"""

    kind: ClassVar[OptionKind] = OptionKind.TEXT_AREA

    foldout_mode: str = "not_collapsable"
    text_alignment: str = "top_left"
    on_changed: Callable[[Any, Any], None] | None = field(default=None, repr=False)

    def _payload(self) -> dict[str, Any]:
        return {"foldout_mode": str(self.foldout_mode), "text_alignment": str(self.text_alignment)}


@dataclass(kw_only=True, eq=False)
class SliderOption(Option):
    """数値スライダー。値は float。

    min_value/max_value はクライアント側の UI レンジで、サーバー側では検証に使うだけ。
    """

    kind: ClassVar[OptionKind] = OptionKind.SLIDER
    returnable_type: ClassVar[OptionValueType] = OptionValueType.NUMBER

    min_value: float = 0.0
    max_value: float = 10.0
    default_value: float = 0.0
    is_integer: bool = False
    string_format: str = "0.##"
    display_format: str = "{0}"
    on_value_received: ValueReceivedHandler | None = field(default=None, repr=False)

    def validate(self) -> bool:
        lo = float(self.min_value)
        hi = float(self.max_value)
        default = float(self.default_value)
        return super().validate() and hi >= lo and lo <= default <= hi

    @property
    def value_received_handler(self) -> ValueReceivedHandler | None:
        return self.on_value_received

    def _payload(self) -> dict[str, Any]:
        return {
            "min_value": float(self.min_value),
            "max_value": float(self.max_value),
            "default_value": float(self.default_value),
            "is_integer": bool(self.is_integer),
            "string_format": str(self.string_format),
            "display_format": str(self.display_format),
        }


@dataclass(kw_only=True, eq=False)
class TwoButtonsOption(Option):
    """2 択トグル。値は「1 つ目が選ばれているか」。"""

    kind: ClassVar[OptionKind] = OptionKind.TWO_BUTTONS
    returnable_type: ClassVar[OptionValueType] = OptionValueType.BOOLEAN

    first_option: str = ""
    second_option: str = ""
    is_second_default: bool = False
    on_clicked: Callable[[Any, bool], None] | None = field(default=None, repr=False)
    on_value_received: ValueReceivedHandler | None = field(default=None, repr=False)

    def validate(self) -> bool:
        return (
            super().validate()
            and not _is_blank(self.first_option)
            and not _is_blank(self.second_option)
        )

    @property
    def value_received_handler(self) -> ValueReceivedHandler | None:
        return self.on_value_received

    def _payload(self) -> dict[str, Any]:
        return {
            "first_option": str(self.first_option),
            "second_option": str(self.second_option),
            "is_second_default": bool(self.is_second_default),
        }


@dataclass(kw_only=True, eq=False)
class OptionNode:
    """ヘッダの下に option を順序付きで束ねるグループ。numeric id は持たない。"""

    header: str
    hint: str | None = None
    padding: bool = False
    options: list[Option] = field(default_factory=list)

    def validate(self) -> bool:
        return not _is_blank(self.header)

    def to_setting(self) -> SettingDefinition:
        """ヘッダ行の SettingDefinition を返す。"""

        return SettingDefinition(
            numeric_id=None,
            kind=OptionKind.HEADER,
            label=str(self.header),
            hint=self.hint,
            payload=MappingProxyType({"padding": bool(self.padding)}),
        )


OPTION_CLASSES: dict[OptionKind, type[Option]] = {
    OptionKind.BUTTON: ButtonOption,
    OptionKind.KEYBIND: KeybindOption,
    OptionKind.DROPDOWN: DropdownOption,
    OptionKind.TEXT_INPUT: TextInputOption,
    OptionKind.TEXT_AREA: TextAreaOption,
    OptionKind.SLIDER: SliderOption,
    OptionKind.TWO_BUTTONS: TwoButtonsOption,
}
"""OptionKind -> 具象クラスの対応表。"""


__all__ = [
    "OPTION_CLASSES",
    "ButtonOption",
    "DropdownOption",
    "KeybindOption",
    "Option",
    "OptionNode",
    "SliderOption",
    "TextAreaOption",
    "TextInputOption",
    "TwoButtonsOption",
    "ValueReceivedHandler",
]
