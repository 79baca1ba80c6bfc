"""In-memory implementations of the store interfaces.

Used by unit tests and local tooling; state lives for the life of the object.
"""

import threading
from dataclasses import replace
from datetime import datetime

from events.domain import Event, EventId, Registration, RegistrationId
from events.domain.checkin import CheckInSession
from events.domain.errors import CounterUpdateFailedError, DuplicateRegistrationError
from events.stores.interfaces import CheckInSessionStore, LedgerStore


class MemoryEventStore(LedgerStore):
    """Dict-backed ledger store. atomic() serializes callers on one re-entrant lock."""

    def __init__(self, events: list[Event] | None = None) -> None:
        self._lock = threading.RLock()
        self._events: dict[EventId, Event] = {e.id: e for e in events or []}
        self._registrations: dict[RegistrationId, Registration] = {}

    def atomic(self):
        return self._lock

    def add_event(self, event: Event) -> None:
        with self._lock:
            self._events[event.id] = event

    def list_events(self) -> list[Event]:
        return sorted(self._events.values(), key=lambda e: e.created_at, reverse=True)

    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        return self._events.get(event_id)

    def event_exists(self, event_id: EventId) -> bool:
        return event_id in self._events

    def increment_registered(self, event_id: EventId) -> None:
        with self._lock:
            event = self._events.get(event_id)
            if event is None or not event.capacity.admits(event.registered):
                raise CounterUpdateFailedError(str(event_id))
            self._events[event_id] = replace(event, registered=event.registered + 1)

    def decrement_registered(self, event_id: EventId) -> None:
        with self._lock:
            event = self._events.get(event_id)
            if event is None:
                raise CounterUpdateFailedError(str(event_id))
            self._events[event_id] = replace(
                event, registered=max(0, event.registered - 1)
            )

    def set_registered(self, event_id: EventId, count: int) -> None:
        with self._lock:
            event = self._events.get(event_id)
            if event is not None:
                self._events[event_id] = replace(event, registered=count)

    def find_registration(self, event_id: EventId, user_id: str) -> Registration | None:
        for registration in self._registrations.values():
            if registration.event_id == event_id and registration.user_id == user_id:
                return registration
        return None

    def add_registration(self, registration: Registration) -> Registration:
        with self._lock:
            if self.find_registration(registration.event_id, registration.user_id):
                raise DuplicateRegistrationError(
                    str(registration.event_id), registration.user_id
                )
            self._registrations[registration.id] = registration
        return registration

    def delete_registration(self, registration_id: RegistrationId) -> None:
        with self._lock:
            self._registrations.pop(registration_id, None)

    def count_for_event(self, event_id: EventId) -> int:
        return sum(1 for r in self._registrations.values() if r.event_id == event_id)

    def list_for_event(self, event_id: EventId) -> list[Registration]:
        return sorted(
            (r for r in self._registrations.values() if r.event_id == event_id),
            key=lambda r: r.registered_at,
        )

    def list_for_user(self, user_id: str) -> list[Registration]:
        return sorted(
            (r for r in self._registrations.values() if r.user_id == user_id),
            key=lambda r: r.registered_at,
            reverse=True,
        )

    def mark_checked_in(self, registration_id: RegistrationId, at: datetime) -> None:
        with self._lock:
            registration = self._registrations.get(registration_id)
            if registration is not None and registration.checked_in_at is None:
                self._registrations[registration_id] = replace(
                    registration, checked_in_at=at
                )


class MemoryCheckInSessionStore(CheckInSessionStore):
    def __init__(self) -> None:
        self._sessions: dict[str, CheckInSession] = {}

    def get(self, session_id: str) -> CheckInSession | None:
        return self._sessions.get(session_id)

    def save(self, session: CheckInSession) -> None:
        self._sessions[session.id] = session
