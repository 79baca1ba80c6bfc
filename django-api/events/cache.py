"""Cache keys for event responses and their invalidation."""

from django.core.cache import cache
from django.db import transaction

EVENTS_LIST_KEY = "events:list"


def event_detail_key(event_id: object) -> str:
    return f"events:{event_id}"


def checkin_session_key(session_id: str) -> str:
    return f"checkin:session:{session_id}"


def invalidate_event(event_id: object) -> None:
    """Drop cached list and detail responses once the current transaction commits."""
    keys = [EVENTS_LIST_KEY, event_detail_key(event_id)]
    transaction.on_commit(lambda: cache.delete_many(keys))
