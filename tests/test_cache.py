from app.cache import TTLCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = TTLCache(default_ttl=1800, clock=clock)
    cache.set("recommendations:1:all:20", {"recommendations": [1]})

    clock.now += 1799
    assert cache.get("recommendations:1:all:20") == {"recommendations": [1]}
    clock.now += 1
    assert cache.get("recommendations:1:all:20") is None


def test_values_are_copied():
    cache = TTLCache()
    value = {"items": [1, 2]}
    cache.set("k", value)
    value["items"].append(3)
    fetched = cache.get("k")
    fetched["items"].append(4)
    assert cache.get("k") == {"items": [1, 2]}


def test_delete_pattern_only_hits_one_user():
    cache = TTLCache()
    cache.set("recommendations:1:all:20", 1)
    cache.set("recommendations:1:manga:5", 2)
    cache.set("recommendations:11:all:20", 3)

    assert cache.delete_pattern("recommendations:1:*") == 2
    assert cache.get("recommendations:11:all:20") == 3


def test_non_positive_ttl_never_expires():
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    cache.set("forever", "x", ttl=0)
    clock.now += 10 ** 9
    assert cache.get("forever") == "x"


def test_ping_leaves_no_entries():
    cache = TTLCache()
    assert cache.ping() is True
    assert len(cache) == 0
