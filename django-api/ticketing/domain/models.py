"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ticketing/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ticketing.domain.lifecycle import TicketStatus
from ticketing.domain.value_objects import Capacity, EventId, Money, OrganizationId, TicketId


class EventStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Role(str, Enum):
    STUDENT = "student"
    ORGANIZER = "organizer"
    ADMIN = "admin"


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event, as published by event moderation."""

    id: EventId
    organization_id: OrganizationId
    title: str
    capacity: Capacity
    ticket_price: Money
    status: EventStatus
    is_approved: bool
    starts_at: datetime
    ends_at: datetime

    def is_claimable(self, now: datetime) -> bool:
        return (
            self.status is EventStatus.PUBLISHED
            and self.is_approved
            and self.starts_at > now
        )

    def has_ended(self, now: datetime) -> bool:
        return self.ends_at <= now


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a Ticket."""

    ticket_id: TicketId
    event_id: EventId
    holder_id: int
    status: TicketStatus
    price: Money
    issued_at: datetime
    credential: str
    used_at: datetime | None = None
    used_by: int | None = None


@dataclass(frozen=True)
class Principal:
    """The already-authenticated caller."""

    user_id: int
    role: Role
    organization_id: OrganizationId | None = None


@dataclass(frozen=True)
class HourlyScans:
    """Number of redemptions within one clock hour."""

    hour: datetime
    scans: int


@dataclass(frozen=True)
class ScanStats:
    """Per-status ticket counts for an event's door staff.

    ``hourly`` is ordered oldest hour first; ``recent`` holds the latest
    redeemed tickets, most recent first.
    """

    event_id: EventId
    total: int
    active: int
    used: int
    cancelled: int
    expired: int
    hourly: tuple[HourlyScans, ...] = ()
    recent: tuple[Ticket, ...] = ()

    @property
    def attendance_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.used / self.total * 100
