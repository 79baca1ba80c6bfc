"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    starts_at = models.DateTimeField(blank=True, null=True)
    capacity = models.PositiveIntegerField(
        default=0, help_text="Maximum attendees. 0 means unlimited."
    )
    registered = models.PositiveIntegerField(default=0)
    is_closed = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="events_event_created_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class Registration(models.Model):
    """Persistence model for registrations. The primary key is the ticket id."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(
        Event, on_delete=models.CASCADE, related_name="registrations"
    )
    user_id = models.CharField(max_length=255)
    user_name = models.CharField(max_length=255)
    user_email = models.EmailField(max_length=255)
    registered_at = models.DateTimeField()
    ticket_qr_data = models.TextField(blank=True)
    checked_in_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ["-registered_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user_id"], name="unique_registration_per_user"
            ),
        ]
        indexes = [
            models.Index(
                fields=["user_id", "-registered_at"], name="events_reg_user_recent_idx"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user_name} - {self.event.title}"
