"""
FitGroup Backend — Webhook Notifier Tests
=========================================

What:  Payload shape and failure handling of the record notification.
How:   httpx.AsyncClient is patched; no network traffic.

Test Strategy:
    ✅ Payload is a Discord embed with exercise, author, time, distance
    ✅ 2xx → True
    ✅ Timeouts, connection errors, HTTP 5xx, invalid URLs → False, never raised
    ✅ Exactly one POST per notification (no retries)
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from fitgroup.models import ExerciseType
from fitgroup.services.webhook_service import WebhookNotifier, build_record_notification

WEBHOOK_URL = "https://discord.com/api/webhooks/123/secret-token"


def make_record():
    return SimpleNamespace(
        exercise_type=ExerciseType.RUN,
        time=30,
        distance=5.0,
        author=SimpleNamespace(nickname="alice"),
        created_at=datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc),
    )


def mock_client(post):
    """Patch target for httpx.AsyncClient used as an async context manager."""
    client = MagicMock()
    client.post = post
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=client)


def test_build_record_notification():
    payload = build_record_notification("Morning Runners", make_record())

    embed = payload["embeds"][0]
    assert "Morning Runners" in embed["description"]
    fields = {f["name"]: f["value"] for f in embed["fields"]}
    assert fields == {
        "Exercise": "run",
        "Author": "alice",
        "Time": "30 min",
        "Distance": "5.0 km",
    }
    assert embed["timestamp"] == "2024-03-31T12:00:00+00:00"


@pytest.mark.asyncio
async def test_successful_delivery():
    request = httpx.Request("POST", WEBHOOK_URL)
    post = AsyncMock(return_value=httpx.Response(204, request=request))

    with patch("fitgroup.services.webhook_service.httpx.AsyncClient", mock_client(post)):
        delivered = await WebhookNotifier(timeout=1.0).notify_record_created(WEBHOOK_URL, {"embeds": []})

    assert delivered is True
    post.assert_awaited_once_with(WEBHOOK_URL, json={"embeds": []})


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectTimeout("timed out"),
        httpx.ConnectError("connection refused"),
    ],
)
async def test_transport_errors_are_swallowed(error):
    post = AsyncMock(side_effect=error)

    with patch("fitgroup.services.webhook_service.httpx.AsyncClient", mock_client(post)):
        delivered = await WebhookNotifier(timeout=1.0).notify_record_created(WEBHOOK_URL, {})

    assert delivered is False
    assert post.await_count == 1


@pytest.mark.asyncio
async def test_error_status_is_swallowed():
    request = httpx.Request("POST", WEBHOOK_URL)
    post = AsyncMock(return_value=httpx.Response(500, request=request))

    with patch("fitgroup.services.webhook_service.httpx.AsyncClient", mock_client(post)):
        delivered = await WebhookNotifier(timeout=1.0).notify_record_created(WEBHOOK_URL, {})

    assert delivered is False


@pytest.mark.asyncio
async def test_unexpected_errors_are_swallowed():
    post = AsyncMock(side_effect=RuntimeError("boom"))

    with patch("fitgroup.services.webhook_service.httpx.AsyncClient", mock_client(post)):
        delivered = await WebhookNotifier(timeout=1.0).notify_record_created(WEBHOOK_URL, {})

    assert delivered is False


@pytest.mark.asyncio
async def test_secret_token_not_logged(caplog):
    post = AsyncMock(side_effect=httpx.ConnectError("connection refused"))

    with patch("fitgroup.services.webhook_service.httpx.AsyncClient", mock_client(post)):
        await WebhookNotifier(timeout=1.0).notify_record_created(WEBHOOK_URL, {})

    assert "discord.com" in caplog.text
    assert "secret-token" not in caplog.text


@pytest.mark.asyncio
async def test_malformed_url_is_swallowed():
    delivered = await WebhookNotifier(timeout=1.0).notify_record_created("not a url", {})

    assert delivered is False
