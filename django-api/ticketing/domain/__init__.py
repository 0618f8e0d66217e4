from ticketing.domain.capacity import CapacityStatus
from ticketing.domain.credentials import TicketCredential
from ticketing.domain.lifecycle import TicketStatus
from ticketing.domain.models import (
    Event,
    EventStatus,
    HourlyScans,
    Principal,
    Role,
    ScanStats,
    Ticket,
)
from ticketing.domain.value_objects import Capacity, EventId, Money, OrganizationId, TicketId

__all__ = [
    "Event",
    "EventStatus",
    "Ticket",
    "TicketStatus",
    "TicketCredential",
    "Principal",
    "Role",
    "ScanStats",
    "HourlyScans",
    "CapacityStatus",
    "EventId",
    "OrganizationId",
    "TicketId",
    "Money",
    "Capacity",
]
