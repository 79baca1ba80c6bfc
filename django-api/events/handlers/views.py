"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import math

from django.conf import settings
from django.core.cache import cache
from django.http import HttpResponse
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.cache import EVENTS_LIST_KEY, event_detail_key
from events.conf import get_setting
from events.domain.errors import DomainError
from events.domain.models import Attendee
from events.handlers.errors import error_response
from events.handlers.permissions import IsEventAdmin
from events.handlers.serializers import (
    CheckInRecordSerializer,
    CheckInSessionSerializer,
    EventSerializer,
    MetricsSerializer,
    RegistrationSerializer,
    ScanRequestSerializer,
    TrendPointSerializer,
)
from events.services import analytics
from events.services.checkin_service import CheckInService
from events.services.event_service import EventService
from events.services.export import event_stats_csv
from events.services.mailer import DjangoTicketMailer
from events.services.registration_service import RegistrationService
from events.stores.django_store import CacheCheckInSessionStore, DjangoEventStore


def event_service() -> EventService:
    return EventService(DjangoEventStore())


def registration_service() -> RegistrationService:
    mailer = None
    if get_setting("SEND_TICKET_EMAIL"):
        mailer = DjangoTicketMailer(
            qr_render_url=get_setting("QR_RENDER_URL"),
            from_email=settings.DEFAULT_FROM_EMAIL,
        )
    return RegistrationService(DjangoEventStore(), mailer=mailer)


def checkin_service() -> CheckInService:
    return CheckInService(
        DjangoEventStore(),
        CacheCheckInSessionStore(timeout=get_setting("CHECK_IN_SESSION_TTL")),
        persist_check_ins=get_setting("PERSIST_CHECK_IN"),
    )


def attendee_from(request: Request) -> Attendee:
    user = request.user
    return Attendee(
        user_id=str(user.pk),
        user_name=user.get_full_name() or user.get_username(),
        user_email=user.email,
    )


class EventListView(APIView):
    """Handler for GET /api/events"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        data = cache.get(EVENTS_LIST_KEY)
        if data is None:
            events = event_service().list_events()
            data = {
                "count": len(events),
                "results": EventSerializer(events, many=True).data,
            }
            cache.set(EVENTS_LIST_KEY, data, get_setting("EVENT_CACHE_TIMEOUT"))
        return Response(data)


class EventDetailView(APIView):
    """Handler for GET /api/events/{event_id}"""

    permission_classes = [AllowAny]

    def get(self, request: Request, event_id: str) -> Response:
        key = event_detail_key(event_id.lower())
        data = cache.get(key)
        if data is None:
            try:
                event = event_service().get_event(event_id)
            except DomainError as exc:
                return error_response(exc)
            data = EventSerializer(event).data
            cache.set(key, data, get_setting("EVENT_CACHE_TIMEOUT"))
        return Response(data)


class EventRegistrationView(APIView):
    """Handler for /api/events/{event_id}/registrations

    POST registers the caller, DELETE unregisters the caller, GET lists all
    registrations for operators.
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [IsEventAdmin()]
        return [IsAuthenticated()]

    def get(self, request: Request, event_id: str) -> Response:
        try:
            registrations = registration_service().list_for_event(event_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(
            {
                "count": len(registrations),
                "results": RegistrationSerializer(registrations, many=True).data,
            }
        )

    def post(self, request: Request, event_id: str) -> Response:
        try:
            registration = registration_service().register(
                event_id, attendee_from(request)
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(
            RegistrationSerializer(registration).data, status=status.HTTP_201_CREATED
        )

    def delete(self, request: Request, event_id: str) -> Response:
        try:
            registration_service().unregister(event_id, str(request.user.pk))
        except DomainError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class UserRegistrationListView(APIView):
    """Handler for GET /api/me/registrations"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        registrations = registration_service().list_for_user(str(request.user.pk))
        return Response(
            {
                "count": len(registrations),
                "results": RegistrationSerializer(registrations, many=True).data,
            }
        )


class ReconcileView(APIView):
    """Handler for POST /api/events/{event_id}/reconcile"""

    permission_classes = [IsEventAdmin]

    def post(self, request: Request, event_id: str) -> Response:
        try:
            count = registration_service().reconcile(event_id)
        except DomainError as exc:
            return error_response(exc)
        return Response({"event_id": event_id, "registered": count})


class EventAnalyticsView(APIView):
    """Handler for GET /api/events/{event_id}/analytics"""

    permission_classes = [IsEventAdmin]

    def get(self, request: Request, event_id: str) -> Response:
        try:
            days_ahead = float(request.query_params.get("days_ahead", 7))
        except ValueError:
            days_ahead = math.nan
        if not math.isfinite(days_ahead):
            return Response(
                {
                    "error": {
                        "code": "INVALID_DAYS_AHEAD",
                        "message": "days_ahead must be a number",
                    }
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            event = event_service().get_event(event_id)
            registrations = registration_service().list_for_event(event_id)
        except DomainError as exc:
            return error_response(exc)

        timestamps = [r.registered_at for r in registrations]
        return Response(
            {
                "event_id": event_id,
                "metrics": MetricsSerializer(analytics.metrics_for(event)).data,
                "growth_rate": analytics.growth_rate(timestamps),
                "days_ahead": days_ahead,
                "projected_registrations": analytics.estimate_future_registrations(
                    timestamps, days_ahead
                ),
                "projected_from_count": analytics.estimate_future_registrations(
                    event.registered,
                    days_ahead,
                    weekly_growth=get_setting("GROWTH_RATE_WEEKLY"),
                ),
                "trend": TrendPointSerializer(
                    analytics.registration_trend(timestamps), many=True
                ).data,
            }
        )


class EventExportView(APIView):
    """Handler for GET /api/events/{event_id}/export.csv"""

    permission_classes = [IsEventAdmin]

    def get(self, request: Request, event_id: str):
        try:
            event = event_service().get_event(event_id)
            registrations = registration_service().list_for_event(event_id)
        except DomainError as exc:
            return error_response(exc)

        body = event_stats_csv(event, analytics.metrics_for(event), registrations)
        filename = "_".join(event.title.split()) or "event"
        response = HttpResponse(body, content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{filename}_stats.csv"'
        return response


class CheckInSessionCreateView(APIView):
    """Handler for POST /api/events/{event_id}/check-in/sessions"""

    permission_classes = [IsEventAdmin]

    def post(self, request: Request, event_id: str) -> Response:
        try:
            session = checkin_service().load_session(event_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(
            CheckInSessionSerializer(session).data, status=status.HTTP_201_CREATED
        )


class CheckInSessionView(APIView):
    """Handler for GET/DELETE /api/check-in/sessions/{session_id}"""

    permission_classes = [IsEventAdmin]

    def get(self, request: Request, session_id: str) -> Response:
        try:
            session = checkin_service().get_session(session_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(CheckInSessionSerializer(session).data)

    def delete(self, request: Request, session_id: str) -> Response:
        try:
            session = checkin_service().close(session_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(CheckInSessionSerializer(session).data)


class CheckInScanView(APIView):
    """Handler for POST /api/check-in/sessions/{session_id}/scans"""

    permission_classes = [IsEventAdmin]

    def post(self, request: Request, session_id: str) -> Response:
        payload = ScanRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            record = checkin_service().scan(session_id, payload.validated_data["code"])
        except DomainError as exc:
            return error_response(exc)
        return Response(CheckInRecordSerializer(record).data)


class CheckInResetView(APIView):
    """Handler for POST /api/check-in/sessions/{session_id}/reset"""

    permission_classes = [IsEventAdmin]

    def post(self, request: Request, session_id: str) -> Response:
        try:
            session = checkin_service().reset(session_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(CheckInSessionSerializer(session).data)
