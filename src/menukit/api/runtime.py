"""
どこで: `src/menukit/api/runtime.py`。公開 API のランタイム実装。
何を: 設定ロード・Nonce の初期化・レジストリ/サービスの生成・イベント配線をまとめた MenuRuntime を提供する。
なぜ: グローバル状態を持たず、1 プロセス 1 インスタンスの所有関係を明示的に組み立てるため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from menukit.api.events import OptionEventHandlers
from menukit.core.nonce import Nonce
from menukit.core.options import (
    Option,
    OptionIdentifiersRegistry,
    OptionNode,
    OptionsService,
    PlayerPredicate,
    SettingDefinition,
    default_registry_path,
)
from menukit.core.runtime_config import runtime_config, set_config_path
from menukit.interactive.settings_sync import Player, ServerSettingsSync

_logger = logging.getLogger(__name__)


class MenuRuntime:
    """option 登録・解決サブシステムの所有者。

    Parameters
    ----------
    transport : ServerSettingsSync | None
        ホスト側の同期層。None なら空の ServerSettingsSync を作る。
    config_path : str | Path | None
        設定ファイル（config.yaml）のパス。指定した場合は探索より優先する。
    registry_path : Path | None
        レジストリファイルのパス。None なら config から
        `{config_root}/{cache_dir}/CustomIdRegistry-{port}.txt` を算出する。
    port : int | None
        待受ポート。None なら config の `server.port`。
    seed : int | np.random.Generator | None
        Nonce の乱数源（テスト用）。

    Notes
    -----
    - Nonce はホスト定義の numeric id で初期化し、ホストが定義を差し替えるたびに追記する。
    - `enable()` で transport のリスナーへ登録し、`disable()` で外す。
    """

    def __init__(
        self,
        *,
        transport: ServerSettingsSync | None = None,
        config_path: str | Path | None = None,
        registry_path: Path | None = None,
        port: int | None = None,
        seed: int | np.random.Generator | None = None,
    ) -> None:
        if config_path is not None:
            set_config_path(config_path)
        cfg = runtime_config()
        if cfg.debug:
            logging.getLogger("menukit").setLevel(logging.DEBUG)

        self.transport = transport if transport is not None else ServerSettingsSync()
        self.nonce = Nonce(seed=seed)
        self._seed_nonce(self.transport.defined_settings)

        path = Path(registry_path) if registry_path is not None else default_registry_path(port)
        self.registry = OptionIdentifiersRegistry(path, nonce=self.nonce)
        self.service = OptionsService(registry=self.registry, transport=self.transport)
        self.events = OptionEventHandlers(self.service, self.transport)
        self._enabled = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        """transport のリスナーへ登録する（多重登録はしない）。"""

        if self._enabled:
            return
        self.transport.value_received_listeners.append(self.events.on_setting_value_received)
        self.transport.defined_settings_listeners.append(self._on_defined_settings_updated)
        self._enabled = True

    def disable(self) -> None:
        """transport のリスナーから外す。"""

        if not self._enabled:
            return
        self.transport.value_received_listeners.remove(self.events.on_setting_value_received)
        self.transport.defined_settings_listeners.remove(self._on_defined_settings_updated)
        self._enabled = False

    def __enter__(self) -> MenuRuntime:
        self.enable()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.disable()

    # --- サービスへの委譲 ---
    def register(self, node: OptionNode | None, predicate: PlayerPredicate | None = None) -> None:
        self.service.register(node, predicate)

    def register_for_player(self, node: OptionNode | None, player: Player) -> None:
        self.service.register_for_player(node, player)

    def unregister(self, node: OptionNode | None, predicate: PlayerPredicate | None = None) -> None:
        self.service.unregister(node, predicate)

    def unregister_for_player(self, node: OptionNode | None, player: Player) -> None:
        self.service.unregister_for_player(node, player)

    def get_option(self, key: str | int) -> Option | None:
        """custom id（str）または numeric id（int）で option を返す。"""

        if isinstance(key, str):
            return self.service.get(key)
        return self.service.get_by_id(int(key))

    def get_string_value(self, player: Any, custom_id: str) -> str:
        return self.service.get_string_value(player, custom_id)

    def get_number_value(self, player: Any, custom_id: str) -> float:
        return self.service.get_number_value(player, custom_id)

    def get_boolean_value(self, player: Any, custom_id: str) -> bool:
        return self.service.get_boolean_value(player, custom_id)

    # --- 内部 ---
    def _seed_nonce(self, settings: tuple[SettingDefinition, ...]) -> None:
        if not settings:
            _logger.debug("ホスト定義の設定はありません")
            return
        for definition in settings:
            if definition.numeric_id is None:
                continue
            _logger.debug(
                "ホスト定義の id を使用済みにします: id=%d (%s)",
                definition.numeric_id,
                definition.label,
            )
        self.nonce.mark_used(d.numeric_id for d in settings if d.numeric_id is not None)

    def _on_defined_settings_updated(self, settings: tuple[SettingDefinition, ...]) -> None:
        self._seed_nonce(settings)


__all__ = ["MenuRuntime"]
