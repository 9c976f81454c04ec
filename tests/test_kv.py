from __future__ import annotations

from datetime import datetime, timezone

from gallery_watch.models import Listing
from gallery_watch.repositories import MemoryListingStore, RedisListingStore, make_store


class FakeRedis:
    """Mimics redis-py returning bytes from ``get``."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value.encode("utf-8") if isinstance(value, str) else value
        return True


LISTING = Listing(
    url="https://www.andrewkingart.ca/product/-sullivan-school-/335",
    title="Sullivan School",
    handle="sullivan-school",
    cost=50.0,
    image="https://www.andrewkingart.ca/img/sullivan.jpg",
    out_of_stock=True,
    found_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
)


def test_redis_store_round_trip_under_prefixed_handle() -> None:
    client = FakeRedis()
    store = RedisListingStore(client, prefix="paintings:")  # type: ignore[arg-type]

    assert store.get("sullivan-school") is None
    assert not store.seen("sullivan-school")
    store.put(LISTING)

    assert list(client.data) == ["paintings:sullivan-school"]
    assert store.seen("sullivan-school")
    assert store.get("sullivan-school") == LISTING


def test_make_store_without_url_is_in_process() -> None:
    store = make_store(None)
    assert isinstance(store, MemoryListingStore)
    store.put(LISTING)
    assert store.get("sullivan-school") == LISTING
