from django.urls import path

from events.handlers import (
    CheckInResetView,
    CheckInScanView,
    CheckInSessionCreateView,
    CheckInSessionView,
    EventAnalyticsView,
    EventDetailView,
    EventExportView,
    EventListView,
    EventRegistrationView,
    ReconcileView,
    UserRegistrationListView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/registrations",
        EventRegistrationView.as_view(),
        name="event-registrations",
    ),
    path(
        "events/<str:event_id>/reconcile",
        ReconcileView.as_view(),
        name="event-reconcile",
    ),
    path(
        "events/<str:event_id>/analytics",
        EventAnalyticsView.as_view(),
        name="event-analytics",
    ),
    path(
        "events/<str:event_id>/export.csv",
        EventExportView.as_view(),
        name="event-export",
    ),
    path(
        "events/<str:event_id>/check-in/sessions",
        CheckInSessionCreateView.as_view(),
        name="checkin-session-create",
    ),
    path(
        "check-in/sessions/<str:session_id>",
        CheckInSessionView.as_view(),
        name="checkin-session",
    ),
    path(
        "check-in/sessions/<str:session_id>/scans",
        CheckInScanView.as_view(),
        name="checkin-scan",
    ),
    path(
        "check-in/sessions/<str:session_id>/reset",
        CheckInResetView.as_view(),
        name="checkin-reset",
    ),
    path("me/registrations", UserRegistrationListView.as_view(), name="my-registrations"),
]
