from events.domain.models import Attendee, Event, Registration
from events.domain.ticket_code import TicketCode
from events.domain.value_objects import Capacity, EventId, RegistrationId

__all__ = [
    "Attendee",
    "Event",
    "Registration",
    "TicketCode",
    "EventId",
    "RegistrationId",
    "Capacity",
]
