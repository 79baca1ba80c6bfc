"""Unit tests for EventService and RegistrationService.

These run against the in-memory store and test error handling,
registration invariants and counter repair.
Run with: pytest tests/test_services.py -v
"""

import logging
import random
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

from events.domain import ticket_code
from events.domain.checkin import ScanReason, ScanStatus
from events.domain.errors import (
    CounterUpdateFailedError,
    DuplicateRegistrationError,
    EventClosedError,
    EventFullError,
    EventNotFoundError,
    InvalidEventIdError,
    RegistrationNotFoundError,
)
from events.services.checkin_service import CheckInService
from events.services.event_service import EventService
from events.services.mailer import TicketMailer
from events.services.registration_service import RegistrationService
from events.stores.memory_store import MemoryEventStore
from factories import T0, build_attendee, build_event, build_registration


class FlakyCounterStore(MemoryEventStore):
    """Memory store whose counter writes always fail."""

    def increment_registered(self, event_id):
        raise CounterUpdateFailedError(str(event_id))

    def decrement_registered(self, event_id):
        raise CounterUpdateFailedError(str(event_id))


class RecordingMailer(TicketMailer):
    def __init__(self, succeed=True):
        self.sent = []
        self._succeed = succeed

    def send_ticket(self, registration, event):
        self.sent.append((registration.user_email, event.title))
        return self._succeed


@pytest.fixture
def service(memory_store) -> RegistrationService:
    return RegistrationService(memory_store, clock=lambda: T0)


def registered_count(store, event) -> int:
    return store.get_event(event.id).registered


class TestEventService:
    """Tests for EventService."""

    def test_get_event_invalid_id_raises_error(self, memory_store):
        with pytest.raises(InvalidEventIdError):
            EventService(memory_store).get_event("not-a-uuid")

    def test_get_event_not_found_raises_error(self, memory_store):
        with pytest.raises(EventNotFoundError):
            EventService(memory_store).get_event(str(uuid.uuid4()))

    def test_get_event_returns_event(self, memory_store, small_event):
        assert EventService(memory_store).get_event(str(small_event.id)) == small_event

    def test_list_events(self, memory_store, small_event):
        assert EventService(memory_store).list_events() == [small_event]


class TestRegister:
    def test_register_issues_ticket_and_counts(self, service, memory_store, small_event):
        registration = service.register(str(small_event.id), build_attendee("Alice"))

        assert registration.event_id == small_event.id
        assert registration.registered_at == T0
        assert registration.ticket_qr_data == f"TICKET|{registration.ticket_id}|Alice|My Event"
        decoded = ticket_code.decode(registration.ticket_qr_data)
        assert decoded.ticket_id == registration.ticket_id
        assert registered_count(memory_store, small_event) == 1

    def test_duplicate_registration_rejected(self, service, memory_store, small_event):
        service.register(str(small_event.id), build_attendee("Alice"))
        with pytest.raises(DuplicateRegistrationError):
            service.register(str(small_event.id), build_attendee("Alice"))
        assert registered_count(memory_store, small_event) == 1
        assert memory_store.count_for_event(small_event.id) == 1

    def test_closed_event_rejected(self, service, memory_store):
        event = build_event(capacity=5, is_closed=True)
        memory_store.add_event(event)
        with pytest.raises(EventClosedError):
            service.register(str(event.id), build_attendee("Alice"))

    def test_full_event_rejected(self, service, memory_store):
        event = build_event(capacity=1, registered=1)
        memory_store.add_event(event)
        with pytest.raises(EventFullError):
            service.register(str(event.id), build_attendee("Alice"))
        assert memory_store.count_for_event(event.id) == 0

    def test_duplicate_is_checked_before_closed_and_full(self, service, memory_store):
        event = build_event(capacity=1)
        memory_store.add_event(event)
        service.register(str(event.id), build_attendee("Alice"))
        memory_store.add_event(replace(memory_store.get_event(event.id), is_closed=True))

        with pytest.raises(DuplicateRegistrationError):
            service.register(str(event.id), build_attendee("Alice"))

    def test_closed_is_checked_before_full(self, service, memory_store):
        event = build_event(capacity=1, registered=1, is_closed=True)
        memory_store.add_event(event)
        with pytest.raises(EventClosedError):
            service.register(str(event.id), build_attendee("Alice"))

    def test_unlimited_capacity(self, service, memory_store):
        event = build_event(capacity=0)
        memory_store.add_event(event)
        for name in ("A", "B", "C", "D"):
            service.register(str(event.id), build_attendee(name))
        assert registered_count(memory_store, event) == 4

    def test_concurrent_registrations_respect_capacity(self, service, memory_store):
        event = build_event(capacity=1)
        memory_store.add_event(event)
        attendees = [build_attendee(f"Member{i}") for i in range(10)]
        start = threading.Barrier(len(attendees))

        def attempt(attendee):
            start.wait()
            try:
                service.register(str(event.id), attendee)
            except EventFullError:
                return False
            return True

        with ThreadPoolExecutor(max_workers=len(attendees)) as pool:
            outcomes = list(pool.map(attempt, attendees))

        assert outcomes.count(True) == 1
        assert registered_count(memory_store, event) == 1
        assert memory_store.count_for_event(event.id) == 1

    def test_unknown_event(self, service):
        with pytest.raises(EventNotFoundError):
            service.register(str(uuid.uuid4()), build_attendee("Alice"))

    def test_invalid_event_id(self, service):
        with pytest.raises(InvalidEventIdError):
            service.register("nope", build_attendee("Alice"))

    def test_counter_failure_is_absorbed(self, small_event, caplog):
        store = FlakyCounterStore([small_event])
        service = RegistrationService(store, clock=lambda: T0)

        with caplog.at_level(logging.WARNING, logger="events.services.registration_service"):
            registration = service.register(str(small_event.id), build_attendee("Alice"))

        assert store.find_registration(small_event.id, "user-alice") == registration
        assert store.get_event(small_event.id).registered == 0
        assert "reconcile" in caplog.text

    def test_ticket_mail_sent(self, memory_store, small_event):
        mailer = RecordingMailer()
        service = RegistrationService(memory_store, mailer=mailer, clock=lambda: T0)
        service.register(str(small_event.id), build_attendee("Alice"))
        assert mailer.sent == [("alice@example.com", "My Event")]

    def test_ticket_mail_failure_does_not_fail_registration(self, memory_store, small_event):
        service = RegistrationService(
            memory_store, mailer=RecordingMailer(succeed=False), clock=lambda: T0
        )
        service.register(str(small_event.id), build_attendee("Alice"))
        assert service.is_registered(str(small_event.id), "user-alice")

    def test_no_mail_on_rejection(self, memory_store):
        event = build_event(capacity=1, registered=1)
        memory_store.add_event(event)
        mailer = RecordingMailer()
        service = RegistrationService(memory_store, mailer=mailer)
        with pytest.raises(EventFullError):
            service.register(str(event.id), build_attendee("Alice"))
        assert mailer.sent == []


class TestUnregister:
    def test_unregister_releases_seat(self, service, memory_store, small_event):
        service.register(str(small_event.id), build_attendee("Alice"))
        service.unregister(str(small_event.id), "user-alice")

        assert registered_count(memory_store, small_event) == 0
        assert not service.is_registered(str(small_event.id), "user-alice")

    def test_unregister_missing_registration(self, service, small_event):
        with pytest.raises(RegistrationNotFoundError):
            service.unregister(str(small_event.id), "user-nobody")

    def test_counter_floored_at_zero(self, service, memory_store, small_event):
        memory_store.add_registration(build_registration(small_event, "Alice"))
        service.unregister(str(small_event.id), "user-alice")
        assert registered_count(memory_store, small_event) == 0

    def test_can_register_again_after_unregister(self, service, memory_store, small_event):
        first = service.register(str(small_event.id), build_attendee("Alice"))
        service.unregister(str(small_event.id), "user-alice")
        second = service.register(str(small_event.id), build_attendee("Alice"))
        assert second.ticket_id != first.ticket_id
        assert registered_count(memory_store, small_event) == 1


class TestReconcile:
    def test_repairs_undercount(self, small_event):
        store = FlakyCounterStore([small_event])
        service = RegistrationService(store)
        service.register(str(small_event.id), build_attendee("Alice"))
        service.register(str(small_event.id), build_attendee("Bob"))

        assert service.reconcile(str(small_event.id)) == 2
        assert store.get_event(small_event.id).registered == 2

    def test_repairs_overcount(self, service, memory_store):
        event = build_event(capacity=10, registered=7)
        memory_store.add_event(event)
        memory_store.add_registration(build_registration(event, "Alice"))
        assert service.reconcile(str(event.id)) == 1

    def test_idempotent(self, service, memory_store, small_event):
        service.register(str(small_event.id), build_attendee("Alice"))
        first = service.reconcile(str(small_event.id))
        second = service.reconcile(str(small_event.id))
        assert first == second == memory_store.count_for_event(small_event.id)

    def test_unknown_event(self, service):
        with pytest.raises(EventNotFoundError):
            service.reconcile(str(uuid.uuid4()))


class TestListings:
    def test_list_for_user_newest_first(self, memory_store):
        times = iter([T0.replace(hour=h) for h in (9, 10, 11)])
        service = RegistrationService(memory_store, clock=lambda: next(times))
        events = [build_event(title=f"E{i}") for i in range(3)]
        for event in events:
            memory_store.add_event(event)
            service.register(str(event.id), build_attendee("Alice"))

        titles = [
            ticket_code.decode(r.ticket_qr_data).event_title
            for r in service.list_for_user("user-alice")
        ]
        assert titles == ["E2", "E1", "E0"]

    def test_list_for_event(self, service, small_event):
        service.register(str(small_event.id), build_attendee("Alice"))
        assert [r.user_name for r in service.list_for_event(str(small_event.id))] == ["Alice"]

    def test_list_for_unknown_event(self, service):
        with pytest.raises(EventNotFoundError):
            service.list_for_event(str(uuid.uuid4()))


@pytest.mark.parametrize("seed", range(5))
def test_serialized_calls_keep_counter_exact_and_within_capacity(seed, memory_store):
    """Random register/unregister sequences never break the counter invariants."""
    rng = random.Random(seed)
    event = build_event(capacity=3)
    memory_store.add_event(event)
    service = RegistrationService(memory_store)
    names = ["Ann", "Ben", "Cat", "Dan", "Eve"]

    for _ in range(60):
        attendee = build_attendee(rng.choice(names))
        try:
            if rng.random() < 0.6:
                service.register(str(event.id), attendee)
            else:
                service.unregister(str(event.id), attendee.user_id)
        except (DuplicateRegistrationError, EventFullError, RegistrationNotFoundError):
            pass

        registered = memory_store.get_event(event.id).registered
        assert 0 <= registered <= 3
        assert registered == memory_store.count_for_event(event.id)
        for name in names:
            matches = [
                r for r in memory_store.list_for_event(event.id)
                if r.user_id == f"user-{name.lower()}"
            ]
            assert len(matches) <= 1


def test_end_to_end_registration_and_check_in(memory_store, session_store):
    event = build_event(capacity=2, title="My Event")
    memory_store.add_event(event)
    service = RegistrationService(memory_store)
    event_id = str(event.id)

    a = service.register(event_id, build_attendee("Alice"))
    assert registered_count(memory_store, event) == 1
    assert a.ticket_qr_data == f"TICKET|{a.ticket_id}|Alice|My Event"

    b = service.register(event_id, build_attendee("Bob"))
    assert registered_count(memory_store, event) == 2

    with pytest.raises(EventFullError):
        service.register(event_id, build_attendee("Carol"))
    assert registered_count(memory_store, event) == 2

    service.unregister(event_id, "user-alice")
    assert registered_count(memory_store, event) == 1

    checkin = CheckInService(memory_store, session_store)
    session = checkin.load_session(event_id)
    stale = checkin.scan(session.id, a.ticket_qr_data)
    assert stale.status is ScanStatus.ERROR
    assert stale.reason is ScanReason.NOT_FOUND
    assert checkin.scan(session.id, b.ticket_qr_data).status is ScanStatus.SUCCESS
