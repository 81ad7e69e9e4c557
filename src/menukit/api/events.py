# どこで: `src/menukit/api/events.py`。
# 何を: transport からの「値受信」通知を option のコールバックへ振り分けるハンドラを提供する。
# なぜ: numeric id → option の解決と、種類ごとのコールバック呼び出しを 1 箇所にまとめるため。

from __future__ import annotations

import logging

from menukit.core.options import (
    ButtonOption,
    DropdownOption,
    KeybindOption,
    Option,
    OptionsService,
    TextAreaOption,
    TwoButtonsOption,
)
from menukit.interactive.settings_sync import Player, ServerSettingsSync

_logger = logging.getLogger(__name__)


class OptionEventHandlers:
    """`ServerSettingsSync.value_received_listeners` に登録するハンドラ群。"""

    def __init__(self, service: OptionsService, transport: ServerSettingsSync) -> None:
        self._service = service
        self._transport = transport

    def on_setting_value_received(self, player: Player, numeric_id: int) -> None:
        """numeric id を option へ解決し、種類別コールバック → 値受信ハンドラの順に呼ぶ。

        menukit が登録していない id（ホスト自身の設定など）は無視する。
        """

        option = self._service.get_by_id(numeric_id)
        if option is None:
            return

        self._dispatch_kind_callback(player, option)

        handler = option.value_received_handler
        if handler is None:
            return
        _logger.debug(
            "値受信ハンドラを呼びます: custom_id=%r id=%d player=%r",
            option.custom_id,
            numeric_id,
            player,
        )
        handler(player, option)

    def _dispatch_kind_callback(self, player: Player, option: Option) -> None:
        state = self._transport.try_get_state(player, option.numeric_id)

        if isinstance(option, ButtonOption):
            if option.on_clicked is not None:
                option.on_clicked(player, option)
            return
        if isinstance(option, KeybindOption):
            # 押下と解放の両方で値が届くので、押下時だけ呼ぶ。
            if option.on_pressed is not None and state is not None and state.value is True:
                option.on_pressed(player, option)
            return
        if isinstance(option, TwoButtonsOption):
            if option.on_clicked is not None and state is not None:
                option.on_clicked(player, bool(state.value))
            return
        if isinstance(option, (DropdownOption, TextAreaOption)):
            if option.on_changed is not None and state is not None:
                option.on_changed(player, state)
            return


__all__ = ["OptionEventHandlers"]
