"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from events.domain.value_objects import Capacity, EventId, RegistrationId


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event.

    `registered` is a denormalized count of the event's registrations and
    can drift from the true count; see RegistrationService.reconcile.
    """

    id: EventId
    title: str
    description: str
    location: str
    capacity: Capacity
    registered: int
    is_closed: bool
    created_at: datetime
    updated_at: datetime
    starts_at: datetime | None = None


@dataclass(frozen=True)
class Registration:
    """Domain representation of a Registration (a ticket)."""

    id: RegistrationId
    event_id: EventId
    user_id: str
    user_name: str
    user_email: str
    registered_at: datetime
    ticket_qr_data: str = ""
    checked_in_at: datetime | None = None

    @property
    def ticket_id(self) -> str:
        return str(self.id)


@dataclass(frozen=True)
class Attendee:
    """Caller identity as supplied by the authentication layer."""

    user_id: str
    user_name: str
    user_email: str
