"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime

from events.domain import Event, EventId, Registration, RegistrationId
from events.domain.checkin import CheckInSession


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by created_at descending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        """Return an event by ID, or None if not found.

        With for_update, the event row stays locked until the enclosing
        atomic() block exits.
        """
        ...

    @abstractmethod
    def event_exists(self, event_id: EventId) -> bool:
        """Check if an event exists."""
        ...

    @abstractmethod
    def increment_registered(self, event_id: EventId) -> None:
        """Add one to the registered counter if the event has room.

        Raises:
            CounterUpdateFailedError: If the counter was not written.
        """
        ...

    @abstractmethod
    def decrement_registered(self, event_id: EventId) -> None:
        """Subtract one from the registered counter, never going below zero.

        Raises:
            CounterUpdateFailedError: If the counter could not be written.
        """
        ...

    @abstractmethod
    def set_registered(self, event_id: EventId, count: int) -> None:
        """Overwrite the registered counter."""
        ...


class RegistrationStore(ABC):
    """Interface for registration persistence operations."""

    @abstractmethod
    def find_registration(self, event_id: EventId, user_id: str) -> Registration | None:
        """Return the user's registration for an event, or None."""
        ...

    @abstractmethod
    def add_registration(self, registration: Registration) -> Registration:
        """Persist a new registration.

        Raises:
            DuplicateRegistrationError: If the user already holds one for the event.
        """
        ...

    @abstractmethod
    def delete_registration(self, registration_id: RegistrationId) -> None:
        """Remove a registration."""
        ...

    @abstractmethod
    def count_for_event(self, event_id: EventId) -> int:
        """Return the number of registrations stored for an event."""
        ...

    @abstractmethod
    def list_for_event(self, event_id: EventId) -> list[Registration]:
        """Return an event's registrations ordered by registered_at ascending."""
        ...

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Registration]:
        """Return a user's registrations ordered by registered_at descending."""
        ...

    @abstractmethod
    def mark_checked_in(self, registration_id: RegistrationId, at: datetime) -> None:
        """Stamp the first check-in time on a registration. Later calls are no-ops."""
        ...


class LedgerStore(EventStore, RegistrationStore):
    """Events and registrations behind one transactional boundary."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Return a context manager that makes the enclosed calls one unit."""
        ...


class CheckInSessionStore(ABC):
    """Interface for holding live check-in sessions between requests."""

    @abstractmethod
    def get(self, session_id: str) -> CheckInSession | None:
        ...

    @abstractmethod
    def save(self, session: CheckInSession) -> None:
        ...
