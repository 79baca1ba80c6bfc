"""CSV statistics export for an event."""

import csv
import io

from events.domain.models import Event, Registration
from events.services.analytics import EventMetrics, round_half_up


def event_stats_csv(
    event: Event, m: EventMetrics, registrations: list[Registration]
) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    writer.writerow(["EVENT INFORMATION"])
    writer.writerow(["Title", event.title])
    writer.writerow(["Starts", event.starts_at.isoformat() if event.starts_at else ""])
    writer.writerow(["Location", event.location])
    writer.writerow(["Closed", "Yes" if event.is_closed else "No"])
    writer.writerow([])

    writer.writerow(["REGISTRATION STATISTICS"])
    writer.writerow(["Total Registered", m.total_registered])
    writer.writerow(["Capacity", m.capacity])
    writer.writerow(["Registration %", f"{round_half_up(m.percentage)}%"])
    writer.writerow(["Spots Remaining", m.spots_remaining])
    writer.writerow(["Full", "Yes" if m.is_full else "No"])
    writer.writerow([])

    writer.writerow(["DETAILED REGISTRATIONS"])
    writer.writerow(["Ticket ID", "User Name", "Email", "Registered At", "Checked In At"])
    for registration in registrations:
        writer.writerow(
            [
                registration.ticket_id,
                registration.user_name,
                registration.user_email,
                registration.registered_at.isoformat(),
                registration.checked_in_at.isoformat()
                if registration.checked_in_at
                else "",
            ]
        )
    return buffer.getvalue()
