"""Tests for the response cache."""

from storefront.utils import cache as cache_module
from storefront.utils.cache import ResponseCache, MUTATION_PREFIXES


class FakeTime:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestResponseCache:
    def test_get_returns_stored_value(self):
        cache = ResponseCache()
        cache.set("prod_1", {"product": 1}, 300)
        assert cache.get("prod_1") == {"product": 1}

    def test_miss_returns_none(self):
        assert ResponseCache().get("missing") is None

    def test_entry_expires_after_ttl(self):
        clock = FakeTime()
        cache = ResponseCache(clock=clock)
        cache.set("ord_x_u", {"order": 1}, 60)

        clock.now += 59
        assert cache.get("ord_x_u") == {"order": 1}

        clock.now += 1
        assert cache.get("ord_x_u") is None

    def test_default_ttl_used_when_not_given(self):
        clock = FakeTime()
        cache = ResponseCache(default_ttl=10, clock=clock)
        cache.set("k", 1)
        clock.now += 11
        assert cache.get("k") is None

    def test_clear_matches_substring_not_only_prefix(self):
        cache = ResponseCache()
        cache.set("user_orders_abc_p1_l10_all", 1)
        cache.set("all_orders_p1_l10_all", 2)
        cache.set("products_p1_l10", 3)

        removed = cache.clear("orders")

        assert removed == 2
        assert cache.get("products_p1_l10") == 3
        assert cache.get("all_orders_p1_l10_all") is None

    def test_clear_without_pattern_flushes_everything(self):
        cache = ResponseCache()
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.clear() == 2
        assert len(cache) == 0

    def test_invalidate_mutation_prefixes(self):
        cache = ResponseCache()
        for key in ["prod_1", "products_p1_l10", "ord_ORD-1_u", "user_orders_u_p1_l10_all",
                    "all_orders_p1_l10_all", "unrelated"]:
            cache.set(key, key)

        cache.invalidate(*MUTATION_PREFIXES)

        assert len(cache) == 1
        assert cache.get("unrelated") == "unrelated"


class TestProcessCache:
    def test_init_cache_replaces_instance(self):
        first = cache_module.init_cache()
        first.set("k", 1)
        second = cache_module.init_cache()
        assert second is not first
        assert cache_module.get_cache() is second
        assert second.get("k") is None
