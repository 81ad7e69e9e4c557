"""
どこで: リポジトリ直下 `main.py`。
何を: API を用いた簡単なメニューを登録し、擬似クライアントの値受信から値の読み出しまでを流す。
なぜ: 動作確認用の最小エントリポイントとして利用するため。
"""

import logging
import sys

sys.path.append("src")

from menukit import DropdownOption, MenuRuntime, OptionNode, Player, SliderOption, TwoButtonsOption

_logger = logging.getLogger("main")


def on_value_received(player, option) -> None:
    _logger.info("値を受信しました: %s (%d) player=%s", option.custom_id, option.numeric_id, player.nickname)


def build_node() -> OptionNode:
    return OptionNode(
        header="Demo",
        hint="menukit demo",
        options=[
            DropdownOption(
                custom_id="Color",
                label="Color",
                options=["Red", "Green", "Blue"],
                default_option_index=1,
                on_value_received=on_value_received,
            ),
            SliderOption(
                custom_id="Volume",
                label="Volume",
                min_value=0,
                max_value=100,
                default_value=15,
                display_format="{0}%",
                on_value_received=on_value_received,
            ),
            TwoButtonsOption(
                custom_id="Hand",
                label="Hand",
                first_option="Left",
                second_option="Right",
                is_second_default=True,
                on_value_received=on_value_received,
            ),
        ],
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    with MenuRuntime() as runtime:
        player = Player(player_id=1, nickname="alice")
        runtime.transport.connect(player)
        runtime.register(build_node())

        color_id = runtime.registry.get("Color")
        runtime.transport.receive_value(player, color_id, "Blue")
        runtime.transport.receive_value(player, runtime.registry.get("Volume"), 42)

        _logger.info("Color=%s", runtime.get_string_value(player, "Color"))
        _logger.info("Volume=%s", runtime.get_number_value(player, "Volume"))
        _logger.info("Hand(first)=%s", runtime.get_boolean_value(player, "Hand"))
        _logger.info("registry=%s", runtime.registry.path)
