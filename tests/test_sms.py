from __future__ import annotations

from datetime import datetime, timezone

import pytest

from gallery_watch.errors import ConfigError, NotificationError
from gallery_watch.models import Listing
from gallery_watch.services.sms import SmsConfig, SmsNotifier


class FakeResponse:
    def __init__(self, status_code: int, payload=None, text: str = "") -> None:
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self._payload = payload
        self.text = text

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return self.response


CONFIG = SmsConfig(
    api_url="https://rest.nexmo.com/sms/json",
    api_key="b545dc4b",
    api_secret="s3cret",
    sms_from="16470000000",
    sms_to="16130000000",
)

LISTING = Listing(
    url="https://www.andrewkingart.ca/product/quiet-bay/336",
    title="Quiet Bay",
    handle="quiet-bay",
    cost=75.5,
    found_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
)


def test_send_posts_listing_url_with_credentials() -> None:
    session = FakeSession(FakeResponse(200, {"message-count": "1", "messages": [{"status": "0"}]}))
    data = SmsNotifier(CONFIG, session=session).send(LISTING)  # type: ignore[arg-type]

    assert data["message-count"] == "1"
    (url, kwargs), = session.calls
    assert url == "https://rest.nexmo.com/sms/json"
    assert kwargs["json"] == {
        "to": "16130000000",
        "from": "16470000000",
        "text": LISTING.url,
        "api_key": "b545dc4b",
        "api_secret": "s3cret",
    }


def test_send_raises_with_response_body_on_failure() -> None:
    session = FakeSession(FakeResponse(500, text="upstream exploded"))
    with pytest.raises(NotificationError) as exc:
        SmsNotifier(CONFIG, session=session).send(LISTING)  # type: ignore[arg-type]
    assert "upstream exploded" in str(exc.value)
    assert exc.value.body == "upstream exploded"
    assert exc.value.status_code == 500


def test_missing_secret_fails_before_request() -> None:
    session = FakeSession(FakeResponse(200, {}))
    cfg = SmsConfig(api_key="k", api_secret=None, sms_from="1", sms_to="2")
    with pytest.raises(ConfigError) as exc:
        SmsNotifier(cfg, session=session).send(LISTING)  # type: ignore[arg-type]
    assert "api_secret" in str(exc.value)
    assert session.calls == []


def test_redirect_status_counts_as_failure() -> None:
    session = FakeSession(FakeResponse(302, {}, text="moved"))
    with pytest.raises(NotificationError) as exc:
        SmsNotifier(CONFIG, session=session).send(LISTING)  # type: ignore[arg-type]
    assert exc.value.status_code == 302
