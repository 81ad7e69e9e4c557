# どこで: `src/menukit/core/options/extraction.py`。
# 何を: ClientSettingState から option の種類ごとに具体値を取り出す関数群と、その分岐表を提供する。
# なぜ: 「型の最初の一致で決める」分岐をやめ、OptionKind ごとに取り出し方を 1 つに固定するため。

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .setting import ClientSettingState
from .value_type import OptionKind, OptionValueType

from menukit.core.errors import InternalConsistencyError, SettingValueUnavailableError


def _dropdown_selected_text(state: ClientSettingState) -> str:
    choices = tuple(state.definition.payload.get("options", ()))
    index = state.value
    if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(choices):
        raise SettingValueUnavailableError(
            f"dropdown {state.numeric_id} に有効な選択がありません: index={index!r}"
        )
    return str(choices[index])


def _text_input_text(state: ClientSettingState) -> str:
    return "" if state.value is None else str(state.value)


def _slider_value(state: ClientSettingState) -> float:
    return float(state.value)


def _two_buttons_is_first(state: ClientSettingState) -> bool:
    return bool(state.value)


_EXTRACTORS: dict[OptionKind, tuple[OptionValueType, Callable[[ClientSettingState], Any]]] = {
    OptionKind.DROPDOWN: (OptionValueType.STRING, _dropdown_selected_text),
    OptionKind.TEXT_INPUT: (OptionValueType.STRING, _text_input_text),
    OptionKind.SLIDER: (OptionValueType.NUMBER, _slider_value),
    OptionKind.TWO_BUTTONS: (OptionValueType.BOOLEAN, _two_buttons_is_first),
}
"""OptionKind -> (返す型, 取り出し関数)。"""


def has_extractor(kind: OptionKind) -> bool:
    """kind の取り出し関数が定義されていれば True を返す。"""

    return kind in _EXTRACTORS


def extract_value(kind: OptionKind, expected: OptionValueType, state: ClientSettingState) -> Any:
    """kind に対応する取り出し関数で state から値を取り出して返す。

    Raises
    ------
    InternalConsistencyError
        kind の取り出し関数が無い、返す型が expected と食い違う、
        または state が別の種類の設定を指している場合（いずれもプログラムの欠陥）。
    SettingValueUnavailableError
        state はあるが、有効な値として解釈できない場合。
    """

    entry = _EXTRACTORS.get(kind)
    if entry is None:
        raise InternalConsistencyError(f"{kind.value} の値を取り出す処理が実装されていません")
    returns, extractor = entry
    if returns is not expected:
        raise InternalConsistencyError(
            f"{kind.value} は {returns.value} を返しますが {expected.value} として要求されました"
        )
    if state.kind is not kind:
        raise InternalConsistencyError(
            f"numeric id {state.numeric_id} の現在値は {state.kind.value} ですが "
            f"{kind.value} として登録されています"
        )
    return extractor(state)


__all__ = ["extract_value", "has_extractor"]
