"""Service layer for the gallery watch task."""

from .scraper import extract_listings, extract_product_links
from .watcher import GalleryWatcher, WatchConfig, filter_unseen

__all__ = ["GalleryWatcher", "WatchConfig", "extract_listings", "extract_product_links", "filter_unseen"]
