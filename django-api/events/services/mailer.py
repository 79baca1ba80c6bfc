"""Ticket confirmation e-mail."""

import logging
from abc import ABC, abstractmethod
from smtplib import SMTPException

from django.core.mail import send_mail

from events.domain.models import Event, Registration
from events.domain.ticket_code import qr_image_url

logger = logging.getLogger(__name__)


class TicketMailer(ABC):
    """Sends a ticket confirmation to an attendee."""

    @abstractmethod
    def send_ticket(self, registration: Registration, event: Event) -> bool:
        """Return True if the message was handed off for delivery."""
        ...


class DjangoTicketMailer(TicketMailer):
    """Sends through the configured Django e-mail backend."""

    def __init__(self, qr_render_url: str, from_email: str | None = None) -> None:
        self._qr_render_url = qr_render_url
        self._from_email = from_email

    def send_ticket(self, registration: Registration, event: Event) -> bool:
        lines = [
            f"Hi {registration.user_name},",
            "",
            f"You're registered for {event.title}.",
        ]
        if event.starts_at is not None:
            lines.append(f"When: {event.starts_at:%A, %B %d, %Y %H:%M}")
        if event.location:
            lines.append(f"Where: {event.location}")
        lines += [
            "",
            f"Ticket ID: {registration.ticket_id}",
            f"Show this QR code at the door: "
            f"{qr_image_url(registration.ticket_qr_data, self._qr_render_url)}",
        ]
        try:
            sent = send_mail(
                subject=f"Your ticket for {event.title}",
                message="\n".join(lines),
                from_email=self._from_email,
                recipient_list=[registration.user_email],
            )
        except (SMTPException, OSError, ValueError):
            logger.warning(
                "Failed to send ticket %s to %s",
                registration.ticket_id,
                registration.user_email,
                exc_info=True,
            )
            return False
        return sent > 0
