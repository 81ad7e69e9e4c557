# どこで: `src/menukit/core/errors.py`。
# 何を: option 登録・解決まわりの例外階層を定義する。
# なぜ: 呼び出し側の入力ミス（回復可能）と内部不整合（欠陥）を型で区別できるようにするため。

from __future__ import annotations


class MenuError(Exception):
    """呼び出し側へ伝播する、回復可能なエラーの基底クラス。"""


class OptionValidationError(MenuError, ValueError):
    """option / node の構造が不正な場合に送出される例外。"""


class OptionNotFoundError(MenuError, LookupError):
    """custom id / numeric id に対応する option（またはエントリ）が無い場合に送出される例外。"""


class SettingValueUnavailableError(OptionNotFoundError):
    """登録済み option について、対象プレイヤーの現在値がまだ届いていない場合に送出される例外。"""


class ReturnTypeMismatchError(MenuError, TypeError):
    """option の returnable_type と要求した値の型が一致しない場合に送出される例外。"""


class MalformedRegistryLineError(MenuError, ValueError):
    """レジストリファイルの 1 行が `custom_id=numeric_id` として解釈できない場合に送出される例外。

    ローダーはこの例外を捕捉して警告ログを出し、その行だけを読み飛ばす。
    """

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


class InternalConsistencyError(RuntimeError):
    """内部不整合（プログラムの欠陥）を表す例外。

    `MenuError` を継承しないので、`except MenuError` で握りつぶされない。
    """


class NonceExhaustedError(InternalConsistencyError):
    """Nonce が試行上限内に未使用値を引けなかった場合に送出される例外。"""


__all__ = [
    "InternalConsistencyError",
    "MalformedRegistryLineError",
    "MenuError",
    "NonceExhaustedError",
    "OptionNotFoundError",
    "OptionValidationError",
    "ReturnTypeMismatchError",
    "SettingValueUnavailableError",
]
