from events.stores.interfaces import (
    CheckInSessionStore,
    EventStore,
    LedgerStore,
    RegistrationStore,
)

__all__ = ["CheckInSessionStore", "EventStore", "LedgerStore", "RegistrationStore"]
