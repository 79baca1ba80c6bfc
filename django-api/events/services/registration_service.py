"""Registration ledger - who holds a seat at which event.

register, unregister and reconcile each run inside one store.atomic() block
with the event row locked, so the duplicate check, capacity check, insert and
counter write happen as a unit. The counter write itself is best-effort: a
failed write is logged and left for reconcile() to repair, because the
registration it follows is already valid.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from events.domain import ticket_code
from events.domain.errors import (
    CounterUpdateFailedError,
    DuplicateRegistrationError,
    EventClosedError,
    EventFullError,
    EventNotFoundError,
    RegistrationNotFoundError,
)
from events.domain.models import Attendee, Event, Registration
from events.domain.value_objects import EventId, RegistrationId
from events.services.event_service import parse_event_id
from events.services.mailer import TicketMailer
from events.stores.interfaces import LedgerStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RegistrationService:
    """Service for registering, unregistering and counting attendees."""

    def __init__(
        self,
        store: LedgerStore,
        mailer: TicketMailer | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._mailer = mailer
        self._clock = clock

    def register(self, event_id: str, attendee: Attendee) -> Registration:
        """Register `attendee` for an event and issue their ticket.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            DuplicateRegistrationError: If the attendee is already registered.
            EventClosedError: If the event no longer accepts registrations.
            EventFullError: If the event's capacity is reached.
        """
        eid = parse_event_id(event_id)
        with self._store.atomic():
            event = self._locked_event(eid, event_id)
            if self._store.find_registration(eid, attendee.user_id) is not None:
                raise DuplicateRegistrationError(event_id, attendee.user_id)
            if event.is_closed:
                raise EventClosedError(event_id)
            if not event.capacity.admits(event.registered):
                raise EventFullError(event_id)

            registration_id = RegistrationId.generate()
            registration = self._store.add_registration(
                Registration(
                    id=registration_id,
                    event_id=eid,
                    user_id=attendee.user_id,
                    user_name=attendee.user_name,
                    user_email=attendee.user_email,
                    registered_at=self._clock(),
                    ticket_qr_data=ticket_code.encode(
                        str(registration_id), attendee.user_name, event.title
                    ),
                )
            )
            try:
                self._store.increment_registered(eid)
            except CounterUpdateFailedError:
                logger.warning(
                    "Registered count for event %s not incremented; run reconcile",
                    eid,
                )

        logger.info(
            "Registered user %s for event %s (ticket %s)",
            attendee.user_id,
            eid,
            registration.ticket_id,
        )
        self._send_ticket(registration, event)
        return registration

    def unregister(self, event_id: str, user_id: str) -> None:
        """Remove a user's registration and release their seat.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            RegistrationNotFoundError: If the user holds no registration.
        """
        eid = parse_event_id(event_id)
        with self._store.atomic():
            self._locked_event(eid, event_id)
            registration = self._store.find_registration(eid, user_id)
            if registration is None:
                raise RegistrationNotFoundError(event_id, user_id)
            self._store.delete_registration(registration.id)
            try:
                self._store.decrement_registered(eid)
            except CounterUpdateFailedError:
                logger.warning(
                    "Registered count for event %s not decremented; run reconcile",
                    eid,
                )
        logger.info("Unregistered user %s from event %s", user_id, eid)

    def reconcile(self, event_id: str) -> int:
        """Recompute the event's registered counter from its registrations.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        eid = parse_event_id(event_id)
        with self._store.atomic():
            event = self._locked_event(eid, event_id)
            count = self._store.count_for_event(eid)
            self._store.set_registered(eid, count)
        if count != event.registered:
            logger.info(
                "Reconciled event %s registered count %d -> %d",
                eid,
                event.registered,
                count,
            )
        return count

    def is_registered(self, event_id: str, user_id: str) -> bool:
        eid = parse_event_id(event_id)
        return self._store.find_registration(eid, user_id) is not None

    def list_for_event(self, event_id: str) -> list[Registration]:
        """Return an event's registrations, oldest first.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        eid = parse_event_id(event_id)
        if not self._store.event_exists(eid):
            raise EventNotFoundError(event_id)
        return self._store.list_for_event(eid)

    def list_for_user(self, user_id: str) -> list[Registration]:
        """Return a user's registrations, newest first."""
        return self._store.list_for_user(user_id)

    def _locked_event(self, eid: EventId, event_id: str) -> Event:
        event = self._store.get_event(eid, for_update=True)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def _send_ticket(self, registration: Registration, event: Event) -> None:
        if self._mailer is None:
            return
        if not self._mailer.send_ticket(registration, event):
            logger.warning(
                "Ticket e-mail for %s was not sent", registration.ticket_id
            )
