from __future__ import annotations

import logging
from typing import Dict, Optional

import redis

from gallery_watch.models import Listing


logger = logging.getLogger(__name__)


class ListingStore:
    """Key-value map from listing handle to the last recorded ``Listing``.

    Entries are only ever added; nothing here deletes or lists keys.
    """

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix

    def key(self, handle: str) -> str:
        return f"{self.prefix}{handle}"

    def _get_raw(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def _set_raw(self, key: str, value: str) -> None:
        raise NotImplementedError

    def get(self, handle: str) -> Optional[Listing]:
        raw = self._get_raw(self.key(handle))
        if raw is None:
            return None
        return Listing.model_validate_json(raw)

    def put(self, listing: Listing) -> None:
        self._set_raw(self.key(listing.handle), listing.model_dump_json())
        logger.info("Recorded listing %s", listing.handle)

    def seen(self, handle: str) -> bool:
        return self._get_raw(self.key(handle)) is not None


class RedisListingStore(ListingStore):
    def __init__(self, client: redis.Redis, prefix: str = "") -> None:
        super().__init__(prefix)
        self._redis = client

    @classmethod
    def from_url(cls, url: str, prefix: str = "") -> "RedisListingStore":
        return cls(redis.Redis.from_url(url), prefix)

    def _get_raw(self, key: str) -> Optional[str]:
        val = self._redis.get(key)
        return val.decode("utf-8") if isinstance(val, (bytes, bytearray)) else val

    def _set_raw(self, key: str, value: str) -> None:
        self._redis.set(key, value)


class MemoryListingStore(ListingStore):
    """In-process store for development runs without Redis."""

    def __init__(self, prefix: str = "") -> None:
        super().__init__(prefix)
        self._data: Dict[str, str] = {}

    def _get_raw(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def _set_raw(self, key: str, value: str) -> None:
        self._data[key] = value


def make_store(redis_url: Optional[str] = None, prefix: str = "") -> ListingStore:
    """Redis-backed store when a URL is configured, otherwise an in-process dict."""
    if redis_url:
        return RedisListingStore.from_url(redis_url, prefix)
    logger.warning("REDIS_URL not set; seen listings will not survive this process")
    return MemoryListingStore(prefix)
