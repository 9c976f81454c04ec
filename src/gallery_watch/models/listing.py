"""Data models for scraped gallery listings."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Listing(BaseModel):
    """Represents a single painting offered on the gallery shop page."""

    url: str
    title: str
    handle: str
    cost: float
    image: Optional[str] = None
    out_of_stock: bool = False
    found_at: datetime
