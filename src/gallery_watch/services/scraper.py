"""Listing extraction from the rendered shop page, built on Scrapy selectors."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterator, List, Optional
from urllib.parse import urlparse
import logging
import re

from scrapy import Selector
from scrapy.http import HtmlResponse
from w3lib.url import safe_url_string

from gallery_watch.models import Listing


logger = logging.getLogger(__name__)

# Product links look like:
# https://www.andrewkingart.ca/product/-sullivan-school-/335?cp=true&sa=true
PRODUCT_PATH_RE = re.compile(r"/product/([^/]+)/")
COST_RE = re.compile(r"\d+(?:\.\d{2})?")
LINE_BREAK_RE = re.compile(r"\n\s*")
EDGE_NON_WORD_RE = re.compile(r"\A\W|\W\Z", re.ASCII)


def product_url(response: HtmlResponse, href: str) -> str:
    """Resolve ``href`` and percent-encode it the way a browser reports ``link.href``."""
    return safe_url_string(response.urljoin(href))


def product_handle(url: str) -> Optional[str]:
    """Return the raw ``/product/{handle}/`` path segment of ``url``, if any."""
    m = PRODUCT_PATH_RE.search(urlparse(url).path)
    return m.group(1) if m else None


def clean_handle(raw: str) -> str:
    """Strip one leading and one trailing non-word character.

    Slugs are derived from quoted titles, so ``-sullivan-school-`` becomes
    ``sullivan-school``.
    """
    return EDGE_NON_WORD_RE.sub("", raw)


def clean_title(raw: str) -> str:
    if raw.startswith('"'):
        raw = raw[1:]
    if raw.endswith('"'):
        raw = raw[:-1]
    return raw


def largest_image(img: Selector, response: HtmlResponse) -> Optional[str]:
    """Pick the last (largest) ``srcset`` candidate, falling back to ``src``."""
    srcset = (img.attrib.get("srcset") or "").strip()
    if srcset:
        last = re.split(r"\s*,\s*", srcset)[-1]
        candidate = re.split(r"\s+", last.strip())[0]
        if candidate:
            return response.urljoin(candidate)
    src = img.attrib.get("src")
    return response.urljoin(src) if src else None


def _nearest_image(link: Selector) -> Optional[Selector]:
    container = link.xpath("ancestor-or-self::*[.//img][1]")
    if not container:
        return None
    imgs = container[0].css("img")
    return imgs[0] if imgs else None


def parse_link(
    link: Selector, response: HtmlResponse, now: Optional[datetime] = None
) -> Optional[Listing]:
    """Build a ``Listing`` from one anchor, or ``None`` when it isn't a product card."""
    href = link.attrib.get("href")
    if not href:
        return None
    url = product_url(response, href)
    raw_handle = product_handle(url)
    if raw_handle is None:
        return None

    text = "".join(link.xpath(".//text()").getall()).strip()
    if not text:
        return None

    # Card text looks like: "Sullivan School"\n\t  \n\t$50.00\n\t  \n\tOut of Stock
    parts = LINE_BREAK_RE.sub("|", text).split("|")
    title = parts[0]
    cost_text = parts[1] if len(parts) > 1 else ""
    stock_text = parts[2] if len(parts) > 2 else ""
    cost_match = COST_RE.search(cost_text)
    if not title or not cost_match:
        return None

    handle = clean_handle(raw_handle)
    if not handle:
        return None

    img = _nearest_image(link)
    return Listing(
        url=url,
        title=clean_title(title),
        handle=handle,
        cost=float(cost_match.group(0)),
        image=largest_image(img, response) if img is not None else None,
        out_of_stock=bool(stock_text.strip()),
        found_at=now or datetime.now(timezone.utc),
    )


def extract_listings(response: HtmlResponse, now: Optional[datetime] = None) -> Iterator[Listing]:
    """Yield every product listing found among the page's anchors.

    Anchors that don't look like product cards are skipped; a malformed card
    never aborts extraction.
    """
    now = now or datetime.now(timezone.utc)
    skipped = 0
    for link in response.css("a"):
        item = parse_link(link, response, now)
        if item is None:
            skipped += 1
            continue
        yield item
    logger.debug("Skipped %d non-listing anchors on %s", skipped, response.url)


def extract_product_links(response: HtmlResponse) -> List[str]:
    """Return absolute product URLs on the page in document order, without repeats."""
    seen: set[str] = set()
    out: List[str] = []
    for href in response.css("a::attr(href)").getall():
        url = product_url(response, href)
        if product_handle(url) is None or url in seen:
            continue
        seen.add(url)
        out.append(url)
    return out
