"""In-process TicketStore.

One lock guards every compound operation, which gives the same
all-or-nothing semantics as the Django store's transactions. Used by tests
and local tooling; state lives only as long as the instance.
"""

import threading
from collections import Counter
from dataclasses import replace
from datetime import datetime

from ticketing.domain import (
    Event,
    EventId,
    HourlyScans,
    OrganizationId,
    Ticket,
    TicketCredential,
    TicketId,
    TicketStatus,
)
from ticketing.domain.capacity import issued_count, reserve_slot
from ticketing.domain.errors import AlreadyClaimedError, EventNotFoundError
from ticketing.stores.interfaces import TicketStore


class InMemoryTicketStore(TicketStore):
    def __init__(self, events: list[Event] | None = None) -> None:
        self._lock = threading.Lock()
        self._events: dict[EventId, Event] = {}
        self._tickets: dict[str, Ticket] = {}
        for event in events or []:
            self.save_event(event)

    def save_event(self, event: Event) -> None:
        with self._lock:
            self._events[event.id] = event

    def get_event(self, event_id: EventId) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def issue_ticket(self, credential: TicketCredential, payload: str) -> Ticket:
        event_id = str(credential.event_id)
        with self._lock:
            event = self._events.get(credential.event_id)
            if event is None:
                raise EventNotFoundError(event_id)

            live = [
                ticket
                for ticket in self._tickets.values()
                if ticket.event_id == event.id and ticket.status in TicketStatus.occupying()
            ]
            if any(ticket.holder_id == credential.holder_id for ticket in live):
                raise AlreadyClaimedError(event_id)
            reserve_slot(event, len(live))

            ticket = Ticket(
                ticket_id=credential.ticket_id,
                event_id=event.id,
                holder_id=credential.holder_id,
                status=TicketStatus.ACTIVE,
                price=event.ticket_price,
                issued_at=credential.issued_at,
                credential=payload,
            )
            self._tickets[payload] = ticket
            return ticket

    def find_by_credential(self, payload: str) -> Ticket | None:
        with self._lock:
            return self._tickets.get(payload)

    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        with self._lock:
            return self._find(ticket_id)

    def mark_used(
        self,
        payload: str,
        organization_id: OrganizationId,
        used_by: int,
        now: datetime,
    ) -> Ticket | None:
        with self._lock:
            ticket = self._tickets.get(payload)
            if ticket is None or ticket.status is not TicketStatus.ACTIVE:
                return None
            event = self._events[ticket.event_id]
            if event.organization_id != organization_id or event.has_ended(now):
                return None
            used = replace(ticket, status=TicketStatus.USED, used_at=now, used_by=used_by)
            self._tickets[payload] = used
            return used

    def cancel_ticket(self, ticket_id: TicketId) -> Ticket | None:
        with self._lock:
            ticket = self._find(ticket_id)
            if ticket is None or ticket.status is not TicketStatus.ACTIVE:
                return None
            cancelled = replace(ticket, status=TicketStatus.CANCELLED)
            self._tickets[ticket.credential] = cancelled
            return cancelled

    def expire_tickets(self, now: datetime) -> int:
        with self._lock:
            expirable = self._expirable(now)
            for ticket in expirable:
                self._tickets[ticket.credential] = replace(ticket, status=TicketStatus.EXPIRED)
            return len(expirable)

    def count_expirable(self, now: datetime) -> int:
        with self._lock:
            return len(self._expirable(now))

    def count_by_status(self, event_id: EventId) -> dict[TicketStatus, int]:
        counts = {status: 0 for status in TicketStatus}
        with self._lock:
            for ticket in self._tickets.values():
                if ticket.event_id == event_id:
                    counts[ticket.status] += 1
        return counts

    def issued(self, event_id: EventId) -> int:
        return issued_count(self.count_by_status(event_id))

    def list_for_holder(self, holder_id: int) -> list[Ticket]:
        with self._lock:
            tickets = [t for t in self._tickets.values() if t.holder_id == holder_id]
        return sorted(tickets, key=lambda t: t.issued_at, reverse=True)

    def recent_redemptions(self, event_id: EventId, limit: int) -> list[Ticket]:
        used = sorted(self._used(event_id), key=lambda t: t.used_at, reverse=True)
        return used[:limit]

    def redemptions_by_hour(self, event_id: EventId) -> list[HourlyScans]:
        counts = Counter(
            ticket.used_at.replace(minute=0, second=0, microsecond=0)
            for ticket in self._used(event_id)
        )
        return [HourlyScans(hour=hour, scans=counts[hour]) for hour in sorted(counts)]

    def _used(self, event_id: EventId) -> list[Ticket]:
        with self._lock:
            return [
                ticket
                for ticket in self._tickets.values()
                if ticket.event_id == event_id and ticket.status is TicketStatus.USED
            ]

    def _find(self, ticket_id: TicketId) -> Ticket | None:
        for ticket in self._tickets.values():
            if ticket.ticket_id == ticket_id:
                return ticket
        return None

    def _expirable(self, now: datetime) -> list[Ticket]:
        return [
            ticket
            for ticket in self._tickets.values()
            if ticket.status is TicketStatus.ACTIVE
            and self._events[ticket.event_id].has_ended(now)
        ]
