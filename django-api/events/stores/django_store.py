"""Django ORM implementation of the ledger store, plus a cache-backed session store."""

from datetime import datetime

from django.core.cache import cache
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F, Q

from events import models
from events.cache import checkin_session_key, invalidate_event
from events.domain import Capacity, Event, EventId, Registration, RegistrationId
from events.domain.checkin import CheckInSession
from events.domain.errors import CounterUpdateFailedError, DuplicateRegistrationError
from events.stores.interfaces import CheckInSessionStore, LedgerStore


def _to_event(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        title=row.title,
        description=row.description,
        location=row.location,
        capacity=Capacity(row.capacity),
        registered=row.registered,
        is_closed=row.is_closed,
        created_at=row.created_at,
        updated_at=row.updated_at,
        starts_at=row.starts_at,
    )


def _to_registration(row: models.Registration) -> Registration:
    return Registration(
        id=RegistrationId(row.id),
        event_id=EventId(row.event_id),
        user_id=row.user_id,
        user_name=row.user_name,
        user_email=row.user_email,
        registered_at=row.registered_at,
        ticket_qr_data=row.ticket_qr_data,
        checked_in_at=row.checked_in_at,
    )


class DjangoEventStore(LedgerStore):
    """Database-backed ledger store using Django ORM.

    Counter writes are single UPDATE statements with F() expressions, so
    concurrent writers never lose an increment.
    """

    def atomic(self):
        return transaction.atomic()

    def list_events(self) -> list[Event]:
        return [_to_event(row) for row in models.Event.objects.order_by("-created_at")]

    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        queryset = models.Event.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.filter(pk=event_id.value).first()
        return _to_event(row) if row is not None else None

    def event_exists(self, event_id: EventId) -> bool:
        return models.Event.objects.filter(pk=event_id.value).exists()

    def increment_registered(self, event_id: EventId) -> None:
        try:
            with transaction.atomic():
                updated = (
                    models.Event.objects.filter(pk=event_id.value)
                    .filter(Q(capacity=0) | Q(registered__lt=F("capacity")))
                    .update(registered=F("registered") + 1)
                )
        except DatabaseError as exc:
            raise CounterUpdateFailedError(str(event_id)) from exc
        if not updated:
            raise CounterUpdateFailedError(str(event_id))
        invalidate_event(event_id.value)

    def decrement_registered(self, event_id: EventId) -> None:
        try:
            with transaction.atomic():
                models.Event.objects.filter(
                    pk=event_id.value, registered__gt=0
                ).update(registered=F("registered") - 1)
        except DatabaseError as exc:
            raise CounterUpdateFailedError(str(event_id)) from exc
        invalidate_event(event_id.value)

    def set_registered(self, event_id: EventId, count: int) -> None:
        models.Event.objects.filter(pk=event_id.value).update(registered=count)
        invalidate_event(event_id.value)

    def find_registration(self, event_id: EventId, user_id: str) -> Registration | None:
        row = models.Registration.objects.filter(
            event_id=event_id.value, user_id=user_id
        ).first()
        return _to_registration(row) if row is not None else None

    def add_registration(self, registration: Registration) -> Registration:
        try:
            with transaction.atomic():
                row = models.Registration.objects.create(
                    id=registration.id.value,
                    event_id=registration.event_id.value,
                    user_id=registration.user_id,
                    user_name=registration.user_name,
                    user_email=registration.user_email,
                    registered_at=registration.registered_at,
                    ticket_qr_data=registration.ticket_qr_data,
                )
        except IntegrityError as exc:
            raise DuplicateRegistrationError(
                str(registration.event_id), registration.user_id
            ) from exc
        return _to_registration(row)

    def delete_registration(self, registration_id: RegistrationId) -> None:
        models.Registration.objects.filter(pk=registration_id.value).delete()

    def count_for_event(self, event_id: EventId) -> int:
        return models.Registration.objects.filter(event_id=event_id.value).count()

    def list_for_event(self, event_id: EventId) -> list[Registration]:
        rows = models.Registration.objects.filter(event_id=event_id.value).order_by(
            "registered_at"
        )
        return [_to_registration(row) for row in rows]

    def list_for_user(self, user_id: str) -> list[Registration]:
        rows = models.Registration.objects.filter(user_id=user_id).order_by(
            "-registered_at"
        )
        return [_to_registration(row) for row in rows]

    def mark_checked_in(self, registration_id: RegistrationId, at: datetime) -> None:
        models.Registration.objects.filter(
            pk=registration_id.value, checked_in_at__isnull=True
        ).update(checked_in_at=at)


class CacheCheckInSessionStore(CheckInSessionStore):
    """Keeps check-in sessions in the Django cache for `timeout` seconds."""

    def __init__(self, timeout: int) -> None:
        self._timeout = timeout

    def get(self, session_id: str) -> CheckInSession | None:
        return cache.get(checkin_session_key(session_id))

    def save(self, session: CheckInSession) -> None:
        cache.set(checkin_session_key(session.id), session, self._timeout)
