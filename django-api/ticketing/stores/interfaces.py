"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Every method that changes
ticket state is a single atomic operation against the backing store; no
implementation may cache capacity or ticket status between calls.
"""

from abc import ABC, abstractmethod
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


class TicketStore(ABC):
    """Interface for ticket persistence operations."""

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def issue_ticket(self, credential: TicketCredential, payload: str) -> Ticket:
        """Atomically guard duplicates, reserve a slot and insert an active ticket.

        The price is snapshotted from the event as read inside the same unit.

        Raises:
            EventNotFoundError: If the event vanished.
            AlreadyClaimedError: If the holder has an active or used ticket.
            SoldOutError: If the capacity ledger refuses the reservation.
            StoreUnavailableError: If the store stayed unavailable.
        """
        ...

    @abstractmethod
    def find_by_credential(self, payload: str) -> Ticket | None:
        """Return the ticket whose stored payload equals ``payload`` exactly."""
        ...

    @abstractmethod
    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        """Return a ticket by its ticket identifier."""
        ...

    @abstractmethod
    def mark_used(
        self,
        payload: str,
        organization_id: OrganizationId,
        used_by: int,
        now: datetime,
    ) -> Ticket | None:
        """Set an active ticket to used in one conditional write.

        The write only applies while the ticket is active, its event belongs to
        ``organization_id`` and the event has not ended. Returns None when
        nothing matched.
        """
        ...

    @abstractmethod
    def cancel_ticket(self, ticket_id: TicketId) -> Ticket | None:
        """Set an active ticket to cancelled. Returns None when nothing matched."""
        ...

    @abstractmethod
    def expire_tickets(self, now: datetime) -> int:
        """Set active tickets of ended events to expired; return how many changed."""
        ...

    @abstractmethod
    def count_expirable(self, now: datetime) -> int:
        """Count active tickets whose event has ended."""
        ...

    @abstractmethod
    def count_by_status(self, event_id: EventId) -> dict[TicketStatus, int]:
        """Return ticket counts for an event keyed by status."""
        ...

    @abstractmethod
    def list_for_holder(self, holder_id: int) -> list[Ticket]:
        """Return a holder's tickets, most recently issued first."""
        ...

    @abstractmethod
    def recent_redemptions(self, event_id: EventId, limit: int) -> list[Ticket]:
        """Return up to ``limit`` used tickets of an event, latest redemption first."""
        ...

    @abstractmethod
    def redemptions_by_hour(self, event_id: EventId) -> list[HourlyScans]:
        """Return redemption counts per clock hour, oldest hour first."""
        ...
