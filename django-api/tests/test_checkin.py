"""Unit tests for check-in session classification."""

from datetime import timedelta

import pytest

from events.domain import ticket_code
from events.domain.checkin import CheckInSession, ScanReason, ScanStatus, SessionState
from events.domain.errors import CheckInSessionClosedError
from factories import T0, build_event, build_registration


@pytest.fixture
def event():
    return build_event(capacity=10, title="My Event")


@pytest.fixture
def alice(event):
    return build_registration(event, "Alice")


@pytest.fixture
def session(event, alice):
    return CheckInSession.load("s-1", event.id, event.title, [alice], loaded_at=T0)


class TestProcessScan:
    def test_known_ticket_checks_in(self, session, alice):
        record = session.process_scan(alice.ticket_qr_data, T0)

        assert record.status is ScanStatus.SUCCESS
        assert record.ticket_id == alice.ticket_id
        assert record.user_name == "Alice"
        assert record.user_email == "alice@example.com"
        assert record.reason is None
        assert session.successful == 1

    def test_second_scan_is_duplicate(self, session, alice):
        session.process_scan(alice.ticket_qr_data, T0)
        record = session.process_scan(alice.ticket_qr_data, T0 + timedelta(minutes=1))

        assert record.status is ScanStatus.DUPLICATE
        assert (session.successful, session.duplicates, session.errors) == (1, 1, 0)

    def test_unknown_ticket_is_not_found_error(self, session):
        raw = ticket_code.encode("missing", "Mallory", "My Event")
        record = session.process_scan(raw, T0)

        assert record.status is ScanStatus.ERROR
        assert record.reason is ScanReason.NOT_FOUND
        assert record.user_name == "Mallory"
        assert record.user_email == "not found"
        assert session.errors == 1

    def test_non_ticket_code_is_invalid_error(self, session):
        record = session.process_scan("EVENT|abc|My Event|123", T0)

        assert record.status is ScanStatus.ERROR
        assert record.reason is ScanReason.INVALID_QR
        assert record.user_name == "Invalid QR Code"
        assert record.ticket_id == "INVALID"

    def test_padded_code_is_not_trimmed(self, session, alice):
        record = session.process_scan(f"  {alice.ticket_qr_data}\n", T0)
        assert record.status is ScanStatus.ERROR
        assert record.reason is ScanReason.INVALID_QR

    def test_title_whitespace_is_echoed_exactly(self, event):
        registration = build_registration(event, "Bob")
        raw = ticket_code.encode(registration.ticket_id, "Bob", "Late Show ")
        session = CheckInSession.load("s-3", event.id, event.title, [registration], T0)

        record = session.process_scan(raw, T0)

        assert record.status is ScanStatus.SUCCESS
        assert record.event_title == "Late Show "

    def test_title_with_delimiter_is_accepted(self, event):
        registration = build_registration(event, "Bob")
        raw = ticket_code.encode(registration.ticket_id, "Bob", "Rock | Roll")
        session = CheckInSession.load("s-2", event.id, event.title, [registration], T0)

        record = session.process_scan(raw, T0)

        assert record.status is ScanStatus.SUCCESS
        assert record.event_title == "Rock | Roll"

    def test_error_scan_does_not_block_later_success(self, session, alice):
        session.process_scan("garbage", T0)
        assert session.process_scan(alice.ticket_qr_data, T0).status is ScanStatus.SUCCESS

    def test_records_are_most_recent_first(self, session, alice):
        session.process_scan("garbage", T0)
        session.process_scan(alice.ticket_qr_data, T0 + timedelta(seconds=5))

        assert [r.status for r in session.records] == [ScanStatus.SUCCESS, ScanStatus.ERROR]
        assert session.total_scans == 2

    def test_classify_does_not_record(self, session, alice):
        session.classify(alice.ticket_qr_data, T0)
        assert session.records == []
        assert session.successful == 0


class TestLifecycle:
    def test_new_session_is_scanning(self, session):
        assert session.state is SessionState.SCANNING

    def test_reset_clears_records_but_keeps_snapshot(self, session, alice):
        session.process_scan(alice.ticket_qr_data, T0)
        session.process_scan(alice.ticket_qr_data, T0)
        session.reset()

        assert session.records == []
        assert (session.successful, session.duplicates, session.errors) == (0, 0, 0)
        assert alice.ticket_id in session.snapshot
        assert session.process_scan(alice.ticket_qr_data, T0).status is ScanStatus.SUCCESS

    def test_closed_session_rejects_scans(self, session, alice):
        session.close()
        assert session.state is SessionState.IDLE
        with pytest.raises(CheckInSessionClosedError):
            session.process_scan(alice.ticket_qr_data, T0)
