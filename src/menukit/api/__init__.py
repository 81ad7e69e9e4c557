# どこで: `src/menukit/api/__init__.py`。
# 何を: 公開 API パッケージのエントリポイントとして MenuRuntime とイベントハンドラを再エクスポートする。
# なぜ: ユーザーコードからシンプルに API を import できるようにするため。

from __future__ import annotations

from .events import OptionEventHandlers
from .runtime import MenuRuntime

__all__ = ["MenuRuntime", "OptionEventHandlers"]
