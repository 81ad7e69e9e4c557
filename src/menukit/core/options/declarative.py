# どこで: `src/menukit/core/options/declarative.py`。
# 何を: dict / YAML で書いた option ツリーを、検証済みの OptionNode / Option へ変換する関数を提供する。
# なぜ: メニュー定義を設定ファイルへ外出ししつつ、内部表現を models の dataclass に統一するため。

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from .models import OPTION_CLASSES, DropdownOption, Option, OptionNode
from .value_type import OptionKind

from menukit.core.errors import OptionValidationError

_NODE_KEYS = {"header", "hint", "padding", "options"}
_RESERVED_OPTION_KEYS = {"numeric_id"}


def _option_keys(cls: type[Option]) -> set[str]:
    names = {f.name for f in dataclasses.fields(cls) if f.init}
    return names - _RESERVED_OPTION_KEYS


def _parse_kind(raw: object) -> OptionKind:
    if isinstance(raw, OptionKind):
        kind = raw
    elif isinstance(raw, str):
        try:
            kind = OptionKind(raw.strip().lower())
        except ValueError as exc:
            raise OptionValidationError(f"未知の option kind です: {raw!r}") from exc
    else:
        raise OptionValidationError(f"option の 'kind' は str である必要があります: got={raw!r}")
    if kind not in OPTION_CLASSES:
        raise OptionValidationError(f"{kind.value} は option として使えません")
    return kind


def _as_str_list(value: object, *, key: str) -> list[str]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise OptionValidationError(f"'{key}' は Sequence[str] である必要があります")
    return [str(x) for x in value]


def option_from_dict(spec: Option | Mapping[str, Any]) -> Option:
    """dict（または Option）から検証済みの Option を返す。

    dict の形式:
    - kind: str（必須。"slider" / "dropdown" など OptionKind の値）
    - custom_id / label: str（必須）
    - それ以外: 各 Option dataclass のフィールド名
    - dropdown のみ `default_option`（エントリ文字列）で既定選択を指定できる

    Raises
    ------
    OptionValidationError
        未知キー・未知 kind・validate() 失敗など、内容が不正な場合。
    """

    if isinstance(spec, Option):
        option = spec
    else:
        if not isinstance(spec, Mapping):
            raise OptionValidationError("option spec は Option または dict である必要があります")
        if "kind" not in spec:
            raise OptionValidationError("option spec には 'kind' が必要です")
        kind = _parse_kind(spec["kind"])
        cls = OPTION_CLASSES[kind]

        fields = {str(k): v for k, v in spec.items() if k != "kind"}
        default_option = fields.pop("default_option", None) if cls is DropdownOption else None

        unknown = set(fields) - _option_keys(cls)
        if unknown:
            names = ", ".join(sorted(unknown))
            raise OptionValidationError(f"{kind.value} の spec に未知キーがあります: {names}")
        if "options" in fields:
            fields["options"] = _as_str_list(fields["options"], key="options")
        if default_option is not None:
            entries = fields.get("options", [])
            if str(default_option) not in entries:
                raise OptionValidationError(f"既定エントリ {default_option!r} が options にありません")
            fields["default_option_index"] = entries.index(str(default_option))

        try:
            option = cls(**fields)
        except TypeError as exc:
            raise OptionValidationError(f"{kind.value} の spec が不正です: {exc}") from exc

    try:
        valid = option.validate()
    except (TypeError, ValueError) as exc:
        raise OptionValidationError(
            f"{type(option).__name__} {option.custom_id!r} のフィールド型が不正です: {exc}"
        ) from exc
    if not valid:
        raise OptionValidationError(
            f"{type(option).__name__} {option.custom_id!r} の構造が不正です"
        )
    return option


def node_from_dict(spec: OptionNode | Mapping[str, Any]) -> OptionNode:
    """dict（または OptionNode）から検証済みの OptionNode を返す。"""

    if isinstance(spec, OptionNode):
        node = spec
        node.options = [option_from_dict(o) for o in node.options]
    else:
        if not isinstance(spec, Mapping):
            raise OptionValidationError("node spec は OptionNode または dict である必要があります")
        unknown = set(str(k) for k in spec.keys()) - _NODE_KEYS
        if unknown:
            names = ", ".join(sorted(unknown))
            raise OptionValidationError(f"node spec に未知キーがあります: {names}")

        raw_options = spec.get("options", [])
        if isinstance(raw_options, (str, bytes)) or not isinstance(raw_options, Sequence):
            raise OptionValidationError("node の 'options' は list である必要があります")

        hint = spec.get("hint")
        node = OptionNode(
            header=str(spec.get("header", "")),
            hint=None if hint is None else str(hint),
            padding=bool(spec.get("padding", False)),
            options=[option_from_dict(o) for o in raw_options],
        )

    if not node.validate():
        raise OptionValidationError("option node の header が空です")
    return node


def nodes_from_yaml_text(text: str, *, source: str = "<string>") -> list[OptionNode]:
    """YAML テキスト（トップレベル `nodes:` の list）から OptionNode の列を返す。"""

    import yaml

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise OptionValidationError(f"メニュー定義 YAML の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return []
    if not isinstance(data, dict):
        raise OptionValidationError(f"メニュー定義 YAML は mapping である必要があります: source={source}")
    raw_nodes = data.get("nodes", [])
    if not isinstance(raw_nodes, list):
        raise OptionValidationError(f"'nodes' は list である必要があります: source={source}")
    return [node_from_dict(n) for n in raw_nodes]


def load_nodes_yaml(path: str | Path) -> list[OptionNode]:
    """YAML ファイルから OptionNode の列をロードして返す。"""

    p = Path(path)
    return nodes_from_yaml_text(p.read_text(encoding="utf-8"), source=str(p))


__all__ = ["load_nodes_yaml", "node_from_dict", "nodes_from_yaml_text", "option_from_dict"]
