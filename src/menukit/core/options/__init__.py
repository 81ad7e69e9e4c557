# どこで: `src/menukit/core/options/__init__.py`。
# 何を: option 登録・解決バックエンドの公開エイリアスをまとめる。
# なぜ: API 層から最小インポートで使えるようにするため。

from .declarative import load_nodes_yaml, node_from_dict, nodes_from_yaml_text, option_from_dict
from .identifiers import OptionIdentifiersRegistry
from .models import (
    ButtonOption,
    DropdownOption,
    KeybindOption,
    Option,
    OptionNode,
    SliderOption,
    TextAreaOption,
    TextInputOption,
    TwoButtonsOption,
)
from .persistence import default_registry_path
from .service import OptionsService, PlayerPredicate, SettingsTransport
from .setting import ClientSettingState, SettingDefinition
from .value_type import OptionKind, OptionValueType

__all__ = [
    "ButtonOption",
    "ClientSettingState",
    "DropdownOption",
    "KeybindOption",
    "Option",
    "OptionIdentifiersRegistry",
    "OptionKind",
    "OptionNode",
    "OptionValueType",
    "OptionsService",
    "PlayerPredicate",
    "SettingDefinition",
    "SettingsTransport",
    "SliderOption",
    "TextAreaOption",
    "TextInputOption",
    "TwoButtonsOption",
    "default_registry_path",
    "load_nodes_yaml",
    "node_from_dict",
    "nodes_from_yaml_text",
    "option_from_dict",
]
