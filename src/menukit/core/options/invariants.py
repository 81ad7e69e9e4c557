# どこで: `src/menukit/core/options/invariants.py`。
# 何を: OptionIdentifiersRegistry / OptionsService の不変条件をテストで検証する関数を提供する。
# なぜ: 全単射などの整合性の知識を 1 箇所へ固定し、踏み抜きを早期検知するため。

from __future__ import annotations

from .codec import INT32_MAX, INT32_MIN
from .identifiers import OptionIdentifiersRegistry
from .models import Option
from .service import OptionsService


def assert_registry_invariants(registry: OptionIdentifiersRegistry) -> None:
    """レジストリの不変条件を検査する。

    Notes
    -----
    テスト専用の検査関数。実行時に常時呼ぶことは想定しない。
    """

    mapping = registry.as_dict()
    for custom_id, numeric_id in mapping.items():
        assert isinstance(custom_id, str)
        assert isinstance(numeric_id, int)
        assert INT32_MIN <= numeric_id <= INT32_MAX
        assert registry.get(custom_id) == numeric_id
        assert registry.get_custom_id(numeric_id) == custom_id

    # numeric_id の一意性（= 全単射）。
    assert len(set(mapping.values())) == len(mapping)


def assert_service_invariants(service: OptionsService) -> None:
    """サービスが保持する option の不変条件を検査する。"""

    seen: list[Option] = []
    for option in service.options:
        assert isinstance(option, Option)
        assert not any(o is option for o in seen)
        seen.append(option)
        assert service.registry.get(option.custom_id) == option.numeric_id

    assert_registry_invariants(service.registry)


__all__ = ["assert_registry_invariants", "assert_service_invariants"]
