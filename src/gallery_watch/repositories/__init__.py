from .kv import ListingStore, MemoryListingStore, RedisListingStore, make_store

__all__ = ["ListingStore", "MemoryListingStore", "RedisListingStore", "make_store"]
