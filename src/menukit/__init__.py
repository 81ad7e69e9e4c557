# どこで: `src/menukit/__init__.py`。
# 何を: ルート `menukit` パッケージを定義する。
# なぜ: import 起点を `menukit` に統一するため。

from __future__ import annotations

from menukit.api import MenuRuntime
from menukit.core.options import (
    ButtonOption,
    DropdownOption,
    KeybindOption,
    OptionNode,
    SliderOption,
    TextAreaOption,
    TextInputOption,
    TwoButtonsOption,
    load_nodes_yaml,
    node_from_dict,
)
from menukit.interactive.settings_sync import Player, ServerSettingsSync

__all__ = [
    "ButtonOption",
    "DropdownOption",
    "KeybindOption",
    "MenuRuntime",
    "OptionNode",
    "Player",
    "ServerSettingsSync",
    "SliderOption",
    "TextAreaOption",
    "TextInputOption",
    "TwoButtonsOption",
    "load_nodes_yaml",
    "node_from_dict",
]
