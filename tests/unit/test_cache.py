import pytest

from holiday_atlas.cache import MemoryCache, NullCache

pytestmark = pytest.mark.unit


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_set_then_get_before_expiry():
    clock = FakeClock()
    cache = MemoryCache(clock=clock)
    cache.set("k", {"v": 1}, ttl=10)
    clock.now += 9.5
    assert cache.get("k") == {"v": 1}
    assert cache.remaining_ttl("k") == pytest.approx(0.5)


def test_entry_expires_and_is_evicted():
    clock = FakeClock()
    cache = MemoryCache(clock=clock)
    cache.set("k", 1, ttl=10)
    clock.now += 10
    assert cache.get("k") is None
    assert len(cache) == 0
    assert cache.remaining_ttl("k") is None


def test_default_ttl_applies_when_not_given():
    clock = FakeClock()
    cache = MemoryCache(default_ttl=5, clock=clock)
    cache.set("k", 1)
    assert cache.remaining_ttl("k") == pytest.approx(5)


def test_no_ttl_never_expires():
    clock = FakeClock()
    cache = MemoryCache(clock=clock)
    cache.set("k", 1)
    clock.now += 10**9
    assert cache.get("k") == 1
    assert cache.remaining_ttl("k") is None


@pytest.mark.parametrize("ttl", [0, -1])
def test_rejects_non_positive_ttl(ttl):
    with pytest.raises(ValueError):
        MemoryCache().set("k", 1, ttl=ttl)


def test_delete_and_clear():
    cache = MemoryCache()
    cache.set("a", 1)
    cache.set("b", 2)
    cache.delete("a")
    cache.delete("missing")
    assert cache.get("a") is None
    cache.clear()
    assert len(cache) == 0


def test_null_cache_stores_nothing():
    cache = NullCache()
    cache.set("k", 1, ttl=10)
    assert cache.get("k") is None
    assert cache.remaining_ttl("k") is None
