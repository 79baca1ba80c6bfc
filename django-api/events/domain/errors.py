"""Domain error codes for the events module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    DUPLICATE_REGISTRATION = "DUPLICATE_REGISTRATION"
    EVENT_CLOSED = "EVENT_CLOSED"
    EVENT_FULL = "EVENT_FULL"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    COUNTER_UPDATE_FAILED = "COUNTER_UPDATE_FAILED"
    CHECK_IN_SESSION_NOT_FOUND = "CHECK_IN_SESSION_NOT_FOUND"
    CHECK_IN_SESSION_CLOSED = "CHECK_IN_SESSION_CLOSED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class DuplicateRegistrationError(DomainError):
    """Raised when a user is already registered for the event."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_REGISTRATION,
            message="Already registered for this event",
        )
        self.event_id = event_id
        self.user_id = user_id


class EventClosedError(DomainError):
    """Raised when registrations for the event are closed."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_CLOSED,
            message="Registration for this event is closed",
        )
        self.event_id = event_id


class EventFullError(DomainError):
    """Raised when the event has no seats left."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_FULL,
            message="Event is full",
        )
        self.event_id = event_id


class RegistrationNotFoundError(DomainError):
    """Raised when the user holds no registration for the event."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message="Registration not found",
        )
        self.event_id = event_id
        self.user_id = user_id


class CounterUpdateFailedError(DomainError):
    """Raised by stores when the registered counter could not be written.

    The registration service absorbs this; callers never see it.
    """

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.COUNTER_UPDATE_FAILED,
            message="Registered count could not be updated",
        )
        self.event_id = event_id


class CheckInSessionNotFoundError(DomainError):
    """Raised when a check-in session is unknown or has expired."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.CHECK_IN_SESSION_NOT_FOUND,
            message="Check-in session not found",
        )
        self.session_id = session_id


class CheckInSessionClosedError(DomainError):
    """Raised when scanning into a session that is no longer scanning."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.CHECK_IN_SESSION_CLOSED,
            message="Check-in session is closed",
        )
        self.session_id = session_id
