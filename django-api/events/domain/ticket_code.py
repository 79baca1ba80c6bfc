"""Ticket code format rendered into QR images and read back at the door.

A ticket code is ``TICKET|<ticket id>|<user name>|<event title>``. The event
title is the last field and may itself contain the delimiter, so decoding
rejoins everything from the fourth field onward. User names are not escaped.
"""

from dataclasses import dataclass
from urllib.parse import quote

PREFIX = "TICKET"
DELIMITER = "|"
MIN_FIELDS = 4


@dataclass(frozen=True)
class TicketCode:
    """Identity embedded in a ticket code."""

    ticket_id: str
    user_name: str
    event_title: str

    def encode(self) -> str:
        return encode(self.ticket_id, self.user_name, self.event_title)


def encode(ticket_id: str, user_name: str, event_title: str) -> str:
    return DELIMITER.join((PREFIX, ticket_id, user_name, event_title))


def decode(raw: str) -> TicketCode | None:
    """Parse a ticket code, returning None if it is not one."""
    if not isinstance(raw, str):
        return None
    parts = raw.split(DELIMITER)
    if len(parts) < MIN_FIELDS or parts[0] != PREFIX:
        return None
    return TicketCode(
        ticket_id=parts[1],
        user_name=parts[2],
        event_title=DELIMITER.join(parts[3:]),
    )


def qr_image_url(code: str, template: str) -> str:
    """Build the external QR renderer URL for `code` from a `{data}` template."""
    return template.format(data=quote(code, safe=""))
