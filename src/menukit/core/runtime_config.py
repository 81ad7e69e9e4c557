# どこで: `src/menukit/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: レジストリの保存先やポート番号を、サーバー運用者が差し替えられるようにするため。

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """menukit の実行時設定。"""

    config_path: Path | None
    config_root: Path
    cache_dir: str
    server_port: int
    debug: bool


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    p = Path(str(path)).expanduser()
    _EXPLICIT_CONFIG_PATH = p
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".menukit" / "config.yaml",
        home / ".config" / "menukit" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_port(value: Any, *, key: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}")
    try:
        port = int(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc
    if not 0 < port < 65536:
        raise RuntimeError(f"{key} は 1..65535 の範囲である必要があります: got={port}")
    return port


def _as_bool(value: Any, *, key: str) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    raise RuntimeError(f"{key} は真偽値である必要があります: got={value!r}")


def _as_dir_name(value: Any, *, key: str) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    if "/" in s or "\\" in s or s in {".", ".."}:
        raise RuntimeError(f"{key} はディレクトリ名（区切り文字なし）である必要があります: got={value!r}")
    return s


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    import yaml

    try:
        data = yaml.safe_load(text)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("menukit")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="menukit/resource/default_config.yaml")


def _merge_section(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """トップレベルのセクション（mapping）はキー単位でマージし、それ以外は上書きする。"""

    out = dict(base)
    for key, value in override.items():
        current = out.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged = dict(current)
            merged.update(value)
            out[key] = merged
        else:
            out[key] = value
    return out


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。"""

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge_section(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge_section(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    config_root = _as_optional_path(paths.get("config_root"))
    if config_root is None:
        raise RuntimeError(
            "paths.config_root が未設定です（同梱 default_config.yaml を確認してください）"
        )
    cache_dir = _as_dir_name(paths.get("cache_dir"), key="paths.cache_dir")
    if cache_dir is None:
        raise RuntimeError(
            "paths.cache_dir が未設定です（同梱 default_config.yaml を確認してください）"
        )

    server = _as_mapping(payload.get("server"), key="server")
    server_port = _as_port(server.get("port"), key="server.port")
    if server_port is None:
        raise RuntimeError(
            "server.port が未設定です（同梱 default_config.yaml を確認してください）"
        )

    logging_section = _as_mapping(payload.get("logging"), key="logging")
    debug = _as_bool(logging_section.get("debug"), key="logging.debug")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        config_root=config_root,
        cache_dir=cache_dir,
        server_port=server_port,
        debug=bool(debug),
    )
    _CONFIG_CACHE = cfg
    return cfg


def cache_root_dir() -> Path:
    """レジストリ等のキャッシュファイルを置くディレクトリを返す。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.menukit/config.yaml` / `~/.config/menukit/config.yaml`
    3) `set_config_path(...)` で指定したパス
    """

    cfg = runtime_config()
    return Path(cfg.config_root) / cfg.cache_dir


__all__ = ["RuntimeConfig", "cache_root_dir", "runtime_config", "set_config_path"]
