"""custom id レジストリ（永続化・全単射・再起動後の安定性）をテスト。"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import numpy as np
import pytest

from menukit.core.errors import OptionNotFoundError, OptionValidationError
from menukit.core.nonce import INT32_MAX, Nonce
from menukit.core.options import OptionIdentifiersRegistry
from menukit.core.options import identifiers
from menukit.core.options.invariants import assert_registry_invariants


def _registry(path: Path, seed: int = 0) -> OptionIdentifiersRegistry:
    return OptionIdentifiersRegistry(path, nonce=Nonce(seed=seed))


def test_startup_creates_directory_and_file(tmp_path: Path) -> None:
    path = tmp_path / "cache" / "CustomIdRegistry-7777.txt"

    registry = _registry(path)

    assert path.is_file()
    assert path.read_text(encoding="utf-8") == ""
    assert len(registry) == 0
    assert registry.path == path


def test_register_is_idempotent_and_persisted(tmp_path: Path) -> None:
    path = tmp_path / "registry.txt"
    registry = _registry(path)

    first = registry.register("Color")
    again = registry.register("Color")

    assert first == again
    assert 0 <= first < INT32_MAX
    assert path.read_text(encoding="utf-8") == f"Color={first}\n"


def test_register_returns_same_id_after_restart(tmp_path: Path) -> None:
    path = tmp_path / "registry.txt"
    before = _registry(path, seed=1)
    ids = {key: before.register(key) for key in ["Color", "Volume", "Hand"]}

    # 別 seed の Nonce でも、ファイルに残っている対応はそのまま使われる。
    after = _registry(path, seed=2)

    assert after.as_dict() == ids
    for key, numeric_id in ids.items():
        assert after.register(key) == numeric_id
    assert_registry_invariants(after)


def test_get_and_get_custom_id_are_inverse(tmp_path: Path) -> None:
    path = tmp_path / "registry.txt"
    path.write_text("alpha=10\nbeta=20\n", encoding="utf-8")
    registry = _registry(path)

    for custom_id, numeric_id in registry.as_dict().items():
        assert registry.get(custom_id) == numeric_id
        assert registry.get_custom_id(numeric_id) == custom_id
    assert "alpha" in registry
    assert "gamma" not in registry


def test_lookup_failures(tmp_path: Path) -> None:
    registry = _registry(tmp_path / "registry.txt")

    with pytest.raises(OptionNotFoundError):
        registry.get("missing")
    with pytest.raises(OptionNotFoundError):
        registry.get_custom_id(123)
    assert registry.try_get("missing") is None
    assert registry.try_get_custom_id(123) is None


def test_malformed_lines_are_skipped(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "registry.txt"
    path.write_text("# comment\n\nabc\nabc=xyz\ngood=42\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        registry = _registry(path)

    assert registry.as_dict() == {"good": 42}
    assert "abc" not in registry
    assert any("abc=xyz" in r.getMessage() for r in caplog.records)


def test_lines_that_are_not_utf8_are_skipped(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "registry.txt"
    path.write_bytes(b"Color=5\n\xff\xfe=6\nVolume=7\n")

    with caplog.at_level(logging.WARNING):
        registry = _registry(path)

    assert registry.as_dict() == {"Color": 5, "Volume": 7}
    assert any("UTF-8" in r.getMessage() for r in caplog.records)


def test_lines_with_unusable_custom_id_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "registry.txt"
    path.write_text("=5\n   =6\nColor=7\n", encoding="utf-8")

    registry = _registry(path)

    assert registry.as_dict() == {"Color": 7}
    assert registry.try_get_custom_id(5) is None


def test_failed_save_does_not_keep_unsaved_id(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "registry.txt"
    registry = _registry(path)
    real_save = identifiers.save_registry_file

    def failing_save(mapping, target):
        raise OSError("disk full")

    monkeypatch.setattr(identifiers, "save_registry_file", failing_save)
    with pytest.raises(OSError):
        registry.register("Color")
    assert "Color" not in registry

    monkeypatch.setattr(identifiers, "save_registry_file", real_save)
    numeric_id = registry.register("Color")

    assert _registry(path, seed=1).get("Color") == numeric_id


def test_register_avoids_ids_loaded_from_previous_session(tmp_path: Path) -> None:
    seed = 5
    colliding = int(np.random.default_rng(seed).integers(0, INT32_MAX))
    path = tmp_path / "registry.txt"
    path.write_text(f"old={colliding}\n", encoding="utf-8")

    # Nonce はファイル由来の id を知らないので、最初の 1 回は必ず衝突する。
    registry = _registry(path, seed=seed)
    new_id = registry.register("new")

    assert new_id != colliding
    assert registry.get("old") == colliding
    assert_registry_invariants(registry)


def test_register_rewrites_whole_file(tmp_path: Path) -> None:
    path = tmp_path / "registry.txt"
    path.write_text("# comment\nbroken\nkept=1\n", encoding="utf-8")
    registry = _registry(path)

    new_id = registry.register("added")

    assert path.read_text(encoding="utf-8") == f"kept=1\nadded={new_id}\n"


def test_save_and_reload_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "registry.txt"
    registry = _registry(path)
    for key in ["a", "b", "c", "d"]:
        registry.register(key)

    registry.save()
    snapshot = registry.as_dict()
    registry.reload()

    assert registry.as_dict() == snapshot


@pytest.mark.parametrize("custom_id", ["", "   ", "a=b", "line\nbreak", "#comment"])
def test_register_rejects_ids_that_cannot_be_persisted(tmp_path: Path, custom_id: str) -> None:
    registry = _registry(tmp_path / "registry.txt")

    with pytest.raises(OptionValidationError):
        registry.register(custom_id)
    assert len(registry) == 0


def test_concurrent_register_assigns_one_id_per_custom_id(tmp_path: Path) -> None:
    registry = _registry(tmp_path / "registry.txt")
    results: list[int] = []
    results_lock = threading.Lock()

    def worker() -> None:
        numeric_id = registry.register("Shared")
        with results_lock:
            results.append(numeric_id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(set(results)) == 1
    assert registry.as_dict() == {"Shared": results[0]}
