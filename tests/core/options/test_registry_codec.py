"""レジストリファイル形式（`custom_id=numeric_id`）の encode/decode をテスト。"""

from __future__ import annotations

import logging

import pytest

from menukit.core.errors import MalformedRegistryLineError
from menukit.core.options.codec import (
    dumps_registry,
    is_ignorable_line,
    loads_registry,
    loads_registry_bytes,
    parse_registry_line,
)


def test_parse_registry_line_accepts_signed_int32() -> None:
    assert parse_registry_line("Color=12") == ("Color", 12)
    assert parse_registry_line("neg=-3") == ("neg", -3)
    assert parse_registry_line("spaced= 7 ") == ("spaced", 7)
    assert parse_registry_line("max=2147483647") == ("max", 2147483647)


@pytest.mark.parametrize(
    "line",
    ["abc", "abc=xyz", "a=b=c", "abc=", "abc=1.5", "abc=2147483648", "abc=1_000", "=5", "  =5"],
)
def test_parse_registry_line_rejects_malformed(line: str) -> None:
    with pytest.raises(MalformedRegistryLineError) as excinfo:
        parse_registry_line(line)
    assert excinfo.value.line == line


def test_is_ignorable_line() -> None:
    assert is_ignorable_line("")
    assert is_ignorable_line("   ")
    assert is_ignorable_line("# comment")
    assert not is_ignorable_line("a=1")


def test_loads_registry_skips_malformed_lines_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    payload = "# header\n\nabc\nabc=xyz\ngood=42\n"

    with caplog.at_level(logging.WARNING, logger="menukit.core.options.codec"):
        mapping = loads_registry(payload)

    assert mapping == {"good": 42}
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2


def test_loads_registry_keeps_bijection() -> None:
    payload = "a=1\nb=1\nc=2\nc=3\nd=2\n"

    mapping = loads_registry(payload)

    # b は a と id 衝突するので捨てる。c は後勝ちで 3 になり、空いた 2 を d が使える。
    assert mapping == {"a": 1, "c": 3, "d": 2}
    assert len(set(mapping.values())) == len(mapping)


def test_loads_registry_handles_crlf() -> None:
    assert loads_registry("a=1\r\nb=2\r\n") == {"a": 1, "b": 2}


def test_dumps_registry_preserves_order() -> None:
    assert dumps_registry({"b": 2, "a": 1}) == "b=2\na=1\n"
    assert dumps_registry({}) == ""


def test_dumps_then_loads_yields_same_mapping() -> None:
    mapping = {"Color": 1, "Volume": 2147483646, "Hand": 0}
    assert loads_registry(dumps_registry(mapping)) == mapping


def test_loads_registry_bytes_skips_lines_that_are_not_utf8(caplog: pytest.LogCaptureFixture) -> None:
    payload = "Color=5\n".encode("utf-8") + b"\xff\xfe=6\r\n" + "色=7\r\n".encode("utf-8")

    with caplog.at_level(logging.WARNING, logger="menukit.core.options.codec"):
        mapping = loads_registry_bytes(payload)

    assert mapping == {"Color": 5, "色": 7}
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1
