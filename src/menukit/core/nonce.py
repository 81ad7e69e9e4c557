# どこで: `src/menukit/core/nonce.py`。
# 何を: プロセス寿命の間は重複しない 32bit 乱数を払い出す Nonce を提供する。
# なぜ: 初出の custom id に、ホスト側の既存 id とも衝突しない numeric id を割り当てるため。

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np

from .errors import NonceExhaustedError

INT32_MAX = 2**31 - 1
DEFAULT_MAX_ATTEMPTS = 1024

_logger = logging.getLogger(__name__)


class Nonce:
    """`[0, INT32_MAX)` から一様に引き、使用済み集合と衝突したら引き直す生成器。

    Parameters
    ----------
    seed : int | np.random.Generator | None
        乱数源。None なら OS のエントロピーで初期化する。
    used : Iterable[int] | None
        最初から使用済みとして扱う値（ホスト側が所有する id など）。
    max_attempts : int
        1 回の `generate_new()` で引き直す上限回数。

    Notes
    -----
    一意性はインスタンス（= セッション）単位。再起動を跨いだ安定性はレジストリ側の責務。
    """

    def __init__(
        self,
        *,
        seed: int | np.random.Generator | None = None,
        used: Iterable[int] | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if int(max_attempts) < 1:
            raise ValueError(f"max_attempts は 1 以上である必要があります: got={max_attempts}")
        if isinstance(seed, np.random.Generator):
            self._rng = seed
        else:
            self._rng = np.random.default_rng(seed)
        self._max_attempts = int(max_attempts)
        self._used: set[int] = set()
        if used is not None:
            self.mark_used(used)

    @property
    def used_numbers(self) -> frozenset[int]:
        """使用済みの値（コピー）を返す。"""

        return frozenset(self._used)

    def __contains__(self, value: object) -> bool:
        return value in self._used

    def __len__(self) -> int:
        return len(self._used)

    def mark_used(self, values: Iterable[int]) -> int:
        """values を使用済みとして登録し、新規に追加された個数を返す。"""

        before = len(self._used)
        self._used.update(int(v) for v in values)
        added = len(self._used) - before
        if added:
            _logger.debug("Nonce に使用済み id を %d 件追加しました", added)
        return added

    def generate_new(self) -> int:
        """未使用の値を 1 つ引き、使用済みとして記録して返す。"""

        for _ in range(self._max_attempts):
            value = int(self._rng.integers(0, INT32_MAX))
            if value not in self._used:
                self._used.add(value)
                return value
        raise NonceExhaustedError(
            f"{self._max_attempts} 回引き直しても未使用の値が得られませんでした"
            f"（used={len(self._used)}）"
        )


__all__ = ["DEFAULT_MAX_ATTEMPTS", "INT32_MAX", "Nonce"]
