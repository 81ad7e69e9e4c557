# どこで: `src/menukit/core/options/identifiers.py`。
# 何を: custom id（文字列）と numeric id（int32）の 1 対 1 対応を永続化するレジストリを定義する。
# なぜ: wire protocol は数値 id しか運べないが、利用側は文字列で option を指したいため。

from __future__ import annotations

import logging
import threading
from pathlib import Path

from .codec import custom_id_problem
from .persistence import load_registry_file, save_registry_file

from menukit.core.errors import OptionNotFoundError, OptionValidationError
from menukit.core.nonce import Nonce

_logger = logging.getLogger(__name__)


class OptionIdentifiersRegistry:
    """custom_id -> numeric_id を保持し、ファイルへ永続化するレジストリ。

    Parameters
    ----------
    path : Path
        レジストリファイル。無ければ（親ディレクトリごと）作成する。
    nonce : Nonce
        初出の custom id に割り当てる値の供給元。

    Notes
    -----
    - 一度書いた custom_id の numeric_id は変えない（ファイルが残る限り再起動後も同じ）。
    - numeric_id は全エントリで一意。前回セッションのファイル由来の値とも衝突させない。
    - `register()` の「確認 → 採番 → 保存」は 1 つのロックで囲う。
    """

    def __init__(self, path: Path, *, nonce: Nonce) -> None:
        self._path = Path(path)
        self._nonce = nonce
        self._lock = threading.RLock()
        self._map: dict[str, int] = {}
        self.reload()

    @property
    def path(self) -> Path:
        """レジストリファイルのパスを返す。"""

        return self._path

    def reload(self) -> None:
        """ファイルから対応表を読み直す（不正行は警告して読み飛ばす）。"""

        _logger.debug("custom id レジストリを初期化します: %s", self._path)
        with self._lock:
            self._map = load_registry_file(self._path)
        _logger.debug("custom id を %d 件ロードしました", len(self._map))

    def save(self) -> None:
        """現在の対応表でファイルを書き直す。"""

        with self._lock:
            save_registry_file(self._map, self._path)

    def register(self, custom_id: str) -> int:
        """custom_id の numeric_id を返す。未登録なら採番して保存してから返す。"""

        custom_id = str(custom_id)
        _check_custom_id(custom_id)
        with self._lock:
            existing = self._map.get(custom_id)
            if existing is not None:
                return existing

            used = set(self._map.values())
            numeric_id = self._nonce.generate_new()
            # Nonce の一意性はセッション内だけなので、ファイル由来の値とも突き合わせる。
            while numeric_id in used:
                numeric_id = self._nonce.generate_new()

            updated = dict(self._map)
            updated[custom_id] = numeric_id
            # 保存に失敗したら対応表は元のまま（未保存の id を返さない）。
            save_registry_file(updated, self._path)
            self._map = updated
        _logger.debug("custom id を登録しました: %r -> %d", custom_id, numeric_id)
        return numeric_id

    def get(self, custom_id: str) -> int:
        """custom_id の numeric_id を返す。

        Raises
        ------
        OptionNotFoundError
            未登録の場合。
        """

        numeric_id = self._map.get(str(custom_id))
        if numeric_id is None:
            raise OptionNotFoundError(f"custom id {custom_id!r} は登録されていません")
        return numeric_id

    def try_get(self, custom_id: str) -> int | None:
        """custom_id の numeric_id を返す。未登録なら None。"""

        return self._map.get(str(custom_id))

    def get_custom_id(self, numeric_id: int) -> str:
        """numeric_id に対応する custom_id を返す。

        Raises
        ------
        OptionNotFoundError
            対応するエントリが無い場合。
        """

        custom_id = self.try_get_custom_id(numeric_id)
        if custom_id is None:
            raise OptionNotFoundError(f"numeric id {numeric_id} に対応する custom id がありません")
        return custom_id

    def try_get_custom_id(self, numeric_id: int) -> str | None:
        """numeric_id に対応する custom_id を返す。無ければ None。"""

        # エントリ数はサーバーの option 数程度なので線形探索で足りる。
        target = int(numeric_id)
        for custom_id, value in self._map.items():
            if value == target:
                return custom_id
        return None

    def as_dict(self) -> dict[str, int]:
        """内部辞書のコピーを返す。"""

        return dict(self._map)

    def __contains__(self, custom_id: object) -> bool:
        return custom_id in self._map

    def __len__(self) -> int:
        return len(self._map)


def _check_custom_id(custom_id: str) -> None:
    """ファイルへ書いて読み戻せない custom_id を弾く。"""

    problem = custom_id_problem(custom_id)
    if problem is not None:
        raise OptionValidationError(f"{problem}: {custom_id!r}")


__all__ = ["OptionIdentifiersRegistry"]
