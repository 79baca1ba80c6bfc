from events.handlers.views import (
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

__all__ = [
    "CheckInResetView",
    "CheckInScanView",
    "CheckInSessionCreateView",
    "CheckInSessionView",
    "EventAnalyticsView",
    "EventDetailView",
    "EventExportView",
    "EventListView",
    "EventRegistrationView",
    "ReconcileView",
    "UserRegistrationListView",
]
