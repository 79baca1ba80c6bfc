"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers

from events.conf import get_setting
from events.domain.ticket_code import qr_image_url
from events.services import analytics


class MetricsSerializer(serializers.Serializer):
    """Serializer for EventMetrics."""

    total_registered = serializers.IntegerField()
    capacity = serializers.IntegerField()
    percentage = serializers.FloatField()
    spots_remaining = serializers.IntegerField()
    is_full = serializers.BooleanField()
    is_near_full = serializers.BooleanField()
    alert_level = serializers.CharField(source="alert_level.value")
    alert_color = serializers.SerializerMethodField()
    alert_message = serializers.SerializerMethodField()

    def get_alert_color(self, obj) -> str:
        return analytics.alert_color(obj.alert_level)

    def get_alert_message(self, obj) -> str | None:
        return analytics.alert_message(obj)


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()
    starts_at = serializers.DateTimeField(allow_null=True)
    capacity = serializers.IntegerField(source="capacity.value")
    registered = serializers.IntegerField()
    is_closed = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    metrics = serializers.SerializerMethodField()

    def get_metrics(self, obj) -> dict:
        return MetricsSerializer(analytics.metrics_for(obj)).data


class RegistrationSerializer(serializers.Serializer):
    """Serializer for Registration domain model (a ticket)."""

    ticket_id = serializers.CharField()
    event_id = serializers.UUIDField(source="event_id.value")
    user_id = serializers.CharField()
    user_name = serializers.CharField()
    user_email = serializers.EmailField()
    registered_at = serializers.DateTimeField()
    ticket_qr_data = serializers.CharField()
    qr_image_url = serializers.SerializerMethodField()
    checked_in_at = serializers.DateTimeField(allow_null=True)

    def get_qr_image_url(self, obj) -> str | None:
        if not obj.ticket_qr_data:
            return None
        return qr_image_url(obj.ticket_qr_data, get_setting("QR_RENDER_URL"))


class CheckInRecordSerializer(serializers.Serializer):
    ticket_id = serializers.CharField()
    user_name = serializers.CharField()
    user_email = serializers.CharField()
    event_title = serializers.CharField()
    checked_in_at = serializers.DateTimeField()
    status = serializers.CharField(source="status.value")
    reason = serializers.SerializerMethodField()

    def get_reason(self, obj) -> str | None:
        return obj.reason.value if obj.reason is not None else None


class CheckInSessionSerializer(serializers.Serializer):
    id = serializers.CharField()
    event_id = serializers.UUIDField(source="event_id.value")
    event_title = serializers.CharField()
    state = serializers.CharField(source="state.value")
    loaded_at = serializers.DateTimeField()
    tickets = serializers.SerializerMethodField()
    successful = serializers.IntegerField()
    duplicates = serializers.IntegerField()
    errors = serializers.IntegerField()
    total_scans = serializers.IntegerField()
    records = CheckInRecordSerializer(many=True)

    def get_tickets(self, obj) -> int:
        return len(obj.snapshot)


class ScanRequestSerializer(serializers.Serializer):
    """Input for a single scan."""

    code = serializers.CharField(max_length=2048)


class TrendPointSerializer(serializers.Serializer):
    day = serializers.DateField()
    count = serializers.IntegerField()
