# どこで: `src/menukit/core/options/value_type.py`。
# 何を: option の種類（OptionKind）と、読み出せる値の型（OptionValueType）を定義する。
# なぜ: 値の取り出しを「種類ごとの分岐表」で行い、型の取り違えを検出できるようにするため。

from __future__ import annotations

from enum import Enum


class OptionValueType(Enum):
    """option の現在値として読み出せる型。"""

    NONE = "none"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


class OptionKind(Enum):
    """option（と node ヘッダ）の種類。"""

    HEADER = "header"
    BUTTON = "button"
    KEYBIND = "keybind"
    DROPDOWN = "dropdown"
    TEXT_INPUT = "text_input"
    TEXT_AREA = "text_area"
    SLIDER = "slider"
    TWO_BUTTONS = "two_buttons"


__all__ = ["OptionKind", "OptionValueType"]
