from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import requests

from gallery_watch.errors import ConfigError, NotificationError
from gallery_watch.models import Listing


logger = logging.getLogger(__name__)

# https://developer.vonage.com/en/messaging/sms/code-snippets/send-an-sms
DEFAULT_API_URL = os.environ.get("VONAGE_SMS_URL", "https://rest.nexmo.com/sms/json")


@dataclass
class SmsConfig:
    api_url: str = DEFAULT_API_URL
    api_key: Optional[str] = os.environ.get("VONAGE_API_KEY")
    api_secret: Optional[str] = os.environ.get("VONAGE_API_SECRET")
    sms_from: Optional[str] = os.environ.get("SMS_FROM")
    sms_to: Optional[str] = os.environ.get("SMS_TO")
    timeout_secs: float = float(os.environ.get("VONAGE_TIMEOUT_SECS", "15"))
    user_agent: str = os.environ.get("HTTP_USER_AGENT", "GalleryWatch/1.0")


class SmsNotifier:
    """Thin client for Vonage's SMS REST API.

    - One POST per call, JSON body with the key/secret pair inline.
    - Any non-2xx answer raises ``NotificationError`` with the response body.
    """

    def __init__(self, config: SmsConfig | None = None, session: requests.Session | None = None) -> None:
        self.config = config or SmsConfig()
        self.session = session or requests.Session()

    def _payload(self, text: str) -> dict[str, Any]:
        missing = [
            name
            for name in ("api_key", "api_secret", "sms_from", "sms_to")
            if not getattr(self.config, name)
        ]
        if missing:
            raise ConfigError(f"SMS configuration missing: {', '.join(missing)}")
        return {
            "to": self.config.sms_to,
            "from": self.config.sms_from,
            "text": text,
            "api_key": self.config.api_key,
            "api_secret": self.config.api_secret,
        }

    def send_text(self, text: str) -> Any:
        payload = self._payload(text)
        resp = self.session.post(
            self.config.api_url,
            json=payload,
            headers={"User-Agent": self.config.user_agent},
            timeout=self.config.timeout_secs,
        )
        if not 200 <= resp.status_code < 300:
            raise NotificationError(resp.text, status_code=resp.status_code)
        data = resp.json()
        logger.info("SMS sent: %s", data)
        return data

    def send(self, listing: Listing) -> Any:
        """Text the listing's URL to the configured recipient."""
        return self.send_text(listing.url)
