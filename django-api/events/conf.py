"""Settings for the events app, read from the CLUBPASS settings dict."""

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "ADMIN_GROUP": "event-admins",
    "PERSIST_CHECK_IN": False,
    "CHECK_IN_SESSION_TTL": 12 * 60 * 60,
    "QR_RENDER_URL": "https://api.qrserver.com/v1/create-qr-code/?size=300x300&data={data}",
    "SEND_TICKET_EMAIL": True,
    "EVENT_CACHE_TIMEOUT": 300,
    "GROWTH_RATE_WEEKLY": 0.1,
}


def get_setting(name: str) -> Any:
    overrides = getattr(settings, "CLUBPASS", {})
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
