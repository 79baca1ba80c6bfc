"""Check-in service - runs door scanning sessions for an event.

Sessions scan against the registrations that existed when the session was
loaded. Registrations made afterwards are not visible until a new session
is loaded. Marking registrations as checked in is opt-in (persist_check_ins).
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from uuid import uuid4

from events.domain.checkin import CheckInRecord, CheckInSession, ScanStatus
from events.domain.errors import CheckInSessionNotFoundError, EventNotFoundError
from events.domain.value_objects import RegistrationId
from events.services.event_service import parse_event_id
from events.stores.interfaces import CheckInSessionStore, LedgerStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CheckInService:
    """Service for check-in sessions."""

    def __init__(
        self,
        store: LedgerStore,
        sessions: CheckInSessionStore,
        persist_check_ins: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._sessions = sessions
        self._persist_check_ins = persist_check_ins
        self._clock = clock

    def load_session(self, event_id: str) -> CheckInSession:
        """Snapshot an event's registrations into a new scanning session.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        eid = parse_event_id(event_id)
        event = self._store.get_event(eid)
        if event is None:
            raise EventNotFoundError(event_id)

        session = CheckInSession.load(
            session_id=uuid4().hex,
            event_id=eid,
            event_title=event.title,
            registrations=self._store.list_for_event(eid),
            loaded_at=self._clock(),
        )
        self._sessions.save(session)
        logger.info(
            "Opened check-in session %s for event %s with %d tickets",
            session.id,
            eid,
            len(session.snapshot),
        )
        return session

    def get_session(self, session_id: str) -> CheckInSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise CheckInSessionNotFoundError(session_id)
        return session

    def scan(self, session_id: str, raw: str) -> CheckInRecord:
        """Classify one scanned code and record it in the session.

        Raises:
            CheckInSessionNotFoundError: If the session is unknown or expired.
            CheckInSessionClosedError: If the session was closed.
        """
        session = self.get_session(session_id)
        record = session.process_scan(raw, self._clock())
        self._sessions.save(session)

        if record.status is ScanStatus.SUCCESS and self._persist_check_ins:
            self._store.mark_checked_in(
                RegistrationId.from_string(record.ticket_id), record.checked_in_at
            )
        logger.debug(
            "Session %s scan %s: %s", session_id, record.ticket_id, record.status.value
        )
        return record

    def reset(self, session_id: str) -> CheckInSession:
        session = self.get_session(session_id)
        session.reset()
        self._sessions.save(session)
        return session

    def close(self, session_id: str) -> CheckInSession:
        """Stop scanning. The closed session stays readable until it expires."""
        session = self.get_session(session_id)
        session.close()
        self._sessions.save(session)
        logger.info(
            "Closed check-in session %s: %d checked in, %d duplicates, %d errors",
            session_id,
            session.successful,
            session.duplicates,
            session.errors,
        )
        return session
