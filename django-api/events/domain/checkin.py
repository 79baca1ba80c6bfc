"""Check-in session bookkeeping.

A session holds a snapshot of one event's registrations, taken when the
session is loaded, and classifies each scanned ticket code against it.
Nothing here writes to the registration ledger.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from events.domain import ticket_code
from events.domain.errors import CheckInSessionClosedError
from events.domain.models import Registration
from events.domain.value_objects import EventId

INVALID_TICKET_ID = "INVALID"
INVALID_NAME = "Invalid QR Code"
UNKNOWN_TITLE = "Unknown"
NOT_FOUND_EMAIL = "not found"


class ScanStatus(Enum):
    SUCCESS = "success"
    DUPLICATE = "duplicate"
    ERROR = "error"


class ScanReason(Enum):
    """Why a scan was classified as an error."""

    INVALID_QR = "invalid QR"
    NOT_FOUND = "not found"


class SessionState(Enum):
    IDLE = "idle"
    SCANNING = "scanning"


@dataclass(frozen=True)
class CheckInRecord:
    """Outcome of a single scan."""

    ticket_id: str
    user_name: str
    user_email: str
    event_title: str
    checked_in_at: datetime
    status: ScanStatus
    reason: ScanReason | None = None


@dataclass
class CheckInSession:
    """Per-session scan state over a registration snapshot.

    `records` is kept most-recent-first.
    """

    id: str
    event_id: EventId
    event_title: str
    snapshot: dict[str, Registration]
    loaded_at: datetime
    records: list[CheckInRecord] = field(default_factory=list)
    successful: int = 0
    duplicates: int = 0
    errors: int = 0
    state: SessionState = SessionState.SCANNING

    @classmethod
    def load(
        cls,
        session_id: str,
        event_id: EventId,
        event_title: str,
        registrations: list[Registration],
        loaded_at: datetime,
    ) -> "CheckInSession":
        return cls(
            id=session_id,
            event_id=event_id,
            event_title=event_title,
            snapshot={r.ticket_id: r for r in registrations},
            loaded_at=loaded_at,
        )

    @property
    def total_scans(self) -> int:
        return len(self.records)

    def has_checked_in(self, ticket_id: str) -> bool:
        return any(
            r.ticket_id == ticket_id and r.status is ScanStatus.SUCCESS
            for r in self.records
        )

    def classify(self, raw: str, at: datetime) -> CheckInRecord:
        """Classify `raw` against the snapshot and prior records without recording it."""
        parsed = ticket_code.decode(raw)
        if parsed is None:
            return CheckInRecord(
                ticket_id=INVALID_TICKET_ID,
                user_name=INVALID_NAME,
                user_email="",
                event_title=UNKNOWN_TITLE,
                checked_in_at=at,
                status=ScanStatus.ERROR,
                reason=ScanReason.INVALID_QR,
            )

        registration = self.snapshot.get(parsed.ticket_id)
        if registration is None:
            return CheckInRecord(
                ticket_id=parsed.ticket_id,
                user_name=parsed.user_name,
                user_email=NOT_FOUND_EMAIL,
                event_title=parsed.event_title,
                checked_in_at=at,
                status=ScanStatus.ERROR,
                reason=ScanReason.NOT_FOUND,
            )

        status = (
            ScanStatus.DUPLICATE
            if self.has_checked_in(parsed.ticket_id)
            else ScanStatus.SUCCESS
        )
        return CheckInRecord(
            ticket_id=parsed.ticket_id,
            user_name=registration.user_name,
            user_email=registration.user_email,
            event_title=parsed.event_title,
            checked_in_at=at,
            status=status,
        )

    def process_scan(self, raw: str, at: datetime) -> CheckInRecord:
        if self.state is not SessionState.SCANNING:
            raise CheckInSessionClosedError(self.id)

        record = self.classify(raw, at)
        self.records.insert(0, record)
        if record.status is ScanStatus.SUCCESS:
            self.successful += 1
        elif record.status is ScanStatus.DUPLICATE:
            self.duplicates += 1
        else:
            self.errors += 1
        return record

    def reset(self) -> None:
        """Clear records and counters. The snapshot is kept."""
        self.records = []
        self.successful = 0
        self.duplicates = 0
        self.errors = 0
        self.state = SessionState.SCANNING

    def close(self) -> None:
        self.state = SessionState.IDLE
