# どこで: `src/menukit/core/options/codec.py`。
# 何を: custom id レジストリのテキスト形式（`custom_id=numeric_id` の行列）の encode/decode を提供する。
# なぜ: ファイル形式をレジストリ本体から分離し、行単位の検証をテスト可能に保つため。

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping

from menukit.core.errors import MalformedRegistryLineError

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")

_logger = logging.getLogger(__name__)


def custom_id_problem(custom_id: str) -> str | None:
    """custom_id がファイルへ書いて読み戻せない場合はその理由を、問題なければ None を返す。"""

    if not custom_id.strip():
        return "custom id が空です"
    if "=" in custom_id or "\n" in custom_id or "\r" in custom_id:
        return "custom id に '=' や改行は使えません"
    if custom_id.startswith("#"):
        return "custom id は '#' で始められません"
    return None


def is_ignorable_line(line: str) -> bool:
    """空行・空白だけの行・`#` 始まりのコメント行なら True を返す。"""

    return not line.strip() or line.startswith("#")


def parse_registry_line(line: str) -> tuple[str, int]:
    """1 行を `(custom_id, numeric_id)` へ変換して返す。

    Raises
    ------
    MalformedRegistryLineError
        `=` がちょうど 1 つでない、左辺が custom id として使えない、
        または右辺が int32 として読めない場合。
    """

    parts = line.split("=")
    if len(parts) != 2:
        raise MalformedRegistryLineError(line, "'=' がちょうど 1 つではありません")
    custom_id, raw_id = parts
    problem = custom_id_problem(custom_id)
    if problem is not None:
        raise MalformedRegistryLineError(line, problem)
    if not _INT_RE.match(raw_id):
        raise MalformedRegistryLineError(line, "numeric id が整数ではありません")
    numeric_id = int(raw_id)
    if not INT32_MIN <= numeric_id <= INT32_MAX:
        raise MalformedRegistryLineError(line, "numeric id が int32 の範囲外です")
    return custom_id, numeric_id


def _decode_line(raw: str | bytes) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedRegistryLineError(
            raw.decode("utf-8", errors="replace"), "UTF-8 として読めません"
        ) from exc


def decode_registry(lines: Iterable[str | bytes]) -> dict[str, int]:
    """行の列から custom_id -> numeric_id を復元して返す。

    Notes
    -----
    - lines は str でも bytes（UTF-8）でもよい。
    - 不正な行（UTF-8 として読めない行を含む）は警告ログを出して読み飛ばす（起動は止めない）。
    - 同じ custom_id が複数回現れたら後勝ち。
    - 別の custom_id が既に使っている numeric_id の行は、全単射を保つため読み飛ばす。
    """

    out: dict[str, int] = {}
    owner_by_id: dict[int, str] = {}
    for lineno, raw in enumerate(lines, start=1):
        try:
            line = _decode_line(raw).rstrip("\r\n")
            if is_ignorable_line(line):
                continue
            custom_id, numeric_id = parse_registry_line(line)
        except MalformedRegistryLineError as exc:
            _logger.warning("不正な行を読み飛ばしました: line=%d %s", lineno, exc)
            continue

        owner = owner_by_id.get(numeric_id)
        if owner is not None and owner != custom_id:
            _logger.warning(
                "numeric id の重複行を読み飛ばしました: line=%d id=%d owner=%r custom_id=%r",
                lineno,
                numeric_id,
                owner,
                custom_id,
            )
            continue

        previous = out.get(custom_id)
        if previous is not None:
            del owner_by_id[previous]
        out[custom_id] = numeric_id
        owner_by_id[numeric_id] = custom_id
    return out


def loads_registry(payload: str) -> dict[str, int]:
    """テキストから custom_id -> numeric_id を復元して返す。"""

    return decode_registry(payload.splitlines())


def loads_registry_bytes(payload: bytes) -> dict[str, int]:
    """ファイルの生バイト列から custom_id -> numeric_id を復元して返す。

    行ごとに UTF-8 で読むので、壊れた行があってもそれ以外の行は生きる。
    """

    return decode_registry(payload.splitlines())


def encode_registry(mapping: Mapping[str, int]) -> list[str]:
    """custom_id -> numeric_id を `custom_id=numeric_id` の行リストへ変換して返す（辞書順を保つ）。"""

    return [f"{custom_id}={int(numeric_id)}" for custom_id, numeric_id in mapping.items()]


def dumps_registry(mapping: Mapping[str, int]) -> str:
    """custom_id -> numeric_id をテキストへ変換して返す。"""

    lines = encode_registry(mapping)
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


__all__ = [
    "custom_id_problem",
    "decode_registry",
    "dumps_registry",
    "encode_registry",
    "is_ignorable_line",
    "loads_registry",
    "loads_registry_bytes",
    "parse_registry_line",
]
