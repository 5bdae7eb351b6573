"""
FitGroup Backend — Webhook Notifier
===================================

What:  Posts a Discord-style embed to a group's webhook when a record is created.
Why:   Groups wire their chat channel to the tracker; the notification is a
       courtesy, so it must never affect the record request that caused it.
How:   Runs as a FastAPI background task after the response is sent. One POST
       with a bounded timeout; any failure is logged and swallowed. There are
       no retries.

Payload:
    {
        "embeds": [{
            "title": "New workout record!",
            "description": "A new record was posted in **Morning Runners**.",
            "fields": [
                {"name": "Exercise", "value": "run", "inline": true},
                {"name": "Author", "value": "alice", "inline": true},
                {"name": "Time", "value": "30 min", "inline": true},
                {"name": "Distance", "value": "5.0 km", "inline": true}
            ],
            "timestamp": "2024-03-31T12:00:00+00:00"
        }]
    }
"""

import logging
from datetime import timezone
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import httpx

from fitgroup.config import settings
from fitgroup.models import Record

logger = logging.getLogger(__name__)

EMBED_COLOR = 0x2ECC71


def build_record_notification(group_name: str, record: Record) -> Dict[str, Any]:
    """Build the embed payload for a newly created record (author must be loaded)."""
    created_at = record.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)

    return {
        "embeds": [
            {
                "title": "New workout record!",
                "description": f"A new record was posted in **{group_name}**.",
                "color": EMBED_COLOR,
                "fields": [
                    {"name": "Exercise", "value": record.exercise_type.value.lower(), "inline": True},
                    {"name": "Author", "value": record.author.nickname, "inline": True},
                    {"name": "Time", "value": f"{record.time} min", "inline": True},
                    {"name": "Distance", "value": f"{record.distance} km", "inline": True},
                ],
                "timestamp": created_at.isoformat(),
            }
        ]
    }


class WebhookNotifier:
    """Fire-and-forget HTTP notifier."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout or settings.webhook_timeout

    async def notify_record_created(self, url: str, payload: Dict[str, Any]) -> bool:
        """
        Deliver one notification.

        Returns:
            True if the webhook answered with a 2xx status, False otherwise.
            Never raises.
        """
        # Webhook URLs embed a secret token; only the host is logged
        host = urlsplit(url).netloc or "<invalid>"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(
                "Webhook delivery to %s failed: %s: %s",
                host,
                type(e).__name__,
                str(e),
            )
            return False
        except Exception:
            logger.error("Unexpected error delivering webhook to %s", host, exc_info=True)
            return False

        logger.info("Webhook delivered to %s (status=%d)", host, response.status_code)
        return True


webhook_notifier = WebhookNotifier()
