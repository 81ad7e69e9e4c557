# どこで: `src/menukit/core/options/persistence.py`。
# 何を: custom id レジストリファイルの永続化（path 算出 / load / save）を提供する。
# なぜ: 再起動を跨いで custom id -> numeric id の対応を変えないため。

from __future__ import annotations

import logging
from pathlib import Path

from .codec import dumps_registry, loads_registry_bytes

from menukit.core.runtime_config import cache_root_dir, runtime_config

_logger = logging.getLogger(__name__)


def default_registry_path(port: int | None = None) -> Path:
    """待受ポートに基づくレジストリファイルの既定パスを返す。

    Notes
    -----
    パスは `{config_root}/{cache_dir}/CustomIdRegistry-{port}.txt`。
    port 未指定時は config の `server.port` を使う。
    同一ホストで複数サーバーを動かしても、ポートごとにファイルが分かれる。
    """

    port_i = int(port) if port is not None else runtime_config().server_port
    return cache_root_dir() / f"CustomIdRegistry-{port_i}.txt"


def ensure_registry_file(path: Path) -> None:
    """親ディレクトリと空のレジストリファイルが無ければ作る。"""

    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        path.touch()
        _logger.debug("レジストリファイルを作成しました: %s", path)


def load_registry_file(path: Path) -> dict[str, int]:
    """レジストリファイルをロードして返す。無ければ空ファイルを作って空 dict を返す。

    UTF-8 として壊れた行は、不正行と同じく警告して読み飛ばす。
    """

    ensure_registry_file(path)
    return loads_registry_bytes(path.read_bytes())


def save_registry_file(mapping: dict[str, int], path: Path) -> None:
    """レジストリ全体を path へ書き直す（追記ではなく全置換）。"""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_registry(mapping), encoding="utf-8")


__all__ = [
    "default_registry_path",
    "ensure_registry_file",
    "load_registry_file",
    "save_registry_file",
]
