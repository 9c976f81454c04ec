"""One watch run: render the shop, find unseen paintings, text the first one."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional

from gallery_watch.models import Listing
from gallery_watch.repositories.kv import ListingStore, make_store
from .browser import BrowserRenderer
from .scraper import extract_listings, extract_product_links
from .sms import SmsNotifier


logger = logging.getLogger(__name__)


@dataclass
class WatchConfig:
    shop_url: str = os.environ.get("GALLERY_SHOP_URL", "https://www.andrewkingart.ca/s/shop")
    wait_selector: str = os.environ.get("GALLERY_WAIT_SELECTOR", "#app > *")
    render_timeout_secs: float = float(os.environ.get("GALLERY_RENDER_TIMEOUT_SECS", "30"))
    webdriver_url: Optional[str] = os.environ.get("WEBDRIVER_URL")
    redis_url: Optional[str] = os.environ.get("REDIS_URL")
    key_prefix: str = os.environ.get("GALLERY_KEY_PREFIX", "")
    lookup_workers: int = int(os.environ.get("GALLERY_LOOKUP_WORKERS", "8"))


@dataclass
class RunResult:
    state: str  # done|failed
    found: int = 0
    new: List[Listing] = field(default_factory=list)
    notified: Optional[Listing] = None
    sms_response: Any = None
    error: Optional[str] = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def filter_unseen(
    listings: Iterable[Listing],
    lookup: Callable[[str], Optional[Any]],
    max_workers: int = 8,
) -> List[Listing]:
    """Keep listings whose handle has no stored entry, preserving input order.

    Lookups are independent and run concurrently. A stored entry excludes the
    listing even when its title or cost has since changed.
    """
    items = list(listings)
    if not items:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(items)))) as pool:
        stored = list(pool.map(lambda listing: lookup(listing.handle), items))
    return [listing for listing, hit in zip(items, stored) if hit is None]


class GalleryWatcher:
    """Drives a run through idle -> browsing -> waiting_for_render -> extracting
    -> deduplicating -> (notifying -> recording | done), or ``failed``.
    """

    def __init__(
        self,
        config: WatchConfig | None = None,
        browser: BrowserRenderer | None = None,
        store: ListingStore | None = None,
        notifier: SmsNotifier | None = None,
    ) -> None:
        self.config = config or WatchConfig()
        self.browser = browser or BrowserRenderer(
            self.config.webdriver_url, timeout=self.config.render_timeout_secs
        )
        self.store = store if store is not None else make_store(self.config.redis_url, self.config.key_prefix)
        self.notifier = notifier or SmsNotifier()
        self.state = "idle"
        self.last_result: Optional[RunResult] = None

    def _enter(self, state: str) -> None:
        logger.debug("Run state %s -> %s", self.state, state)
        self.state = state

    def run(self) -> RunResult:
        result = RunResult(state="idle")
        self.state = "idle"
        try:
            self._enter("browsing")
            logger.info("Loading %s", self.config.shop_url)
            # Rendering covers navigation and the wait for client-side content
            self._enter("waiting_for_render")
            response = self.browser.render(self.config.shop_url, self.config.wait_selector)

            self._enter("extracting")
            found = list(extract_listings(response))
            result.found = len(found)
            logger.info("Extracted %d listings", len(found))

            self._enter("deduplicating")
            result.new = filter_unseen(found, self.store.get, self.config.lookup_workers)
            if not result.new:
                logger.info("No new paintings")
                self._enter("done")
                result.state = self.state
                self.last_result = result
                return result
            logger.info(
                "New paintings found: %s", ", ".join(listing.handle for listing in result.new)
            )

            # Only the first new painting is texted and recorded per run
            first = result.new[0]
            self._enter("notifying")
            result.sms_response = self.notifier.send(first)

            self._enter("recording")
            self.store.put(first)
            result.notified = first
            self._enter("done")
        except Exception as e:
            logger.error("Run failed while %s: %s", self.state, e)
            self._enter("failed")
            result.state = self.state
            result.error = str(e)
            self.last_result = result
            raise
        self.last_result = result
        result.state = self.state
        return result

    def list_links(self) -> List[str]:
        """Log the product links on the shop page without touching storage or SMS."""
        response = self.browser.render(self.config.shop_url, self.config.wait_selector)
        links = extract_product_links(response)
        for url in links:
            logger.info("Product link: %s", url)
        logger.info("Found %d product links", len(links))
        return links
