"""Ticket service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Claims flow through the capacity ledger, the lifecycle and the QR codec.
Redemptions flow through the codec, the authorizer and the lifecycle.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone

from ticketing.domain import (
    CapacityStatus,
    Event,
    EventId,
    Principal,
    ScanStats,
    Ticket,
    TicketCredential,
    TicketId,
    TicketStatus,
)
from ticketing.domain import credentials
from ticketing.domain.errors import (
    EventNotClaimableError,
    EventNotFoundError,
    EventPassedError,
    InvalidEventIdError,
    InvalidTicketIdError,
    NotTicketHolderError,
    TicketNotActiveError,
    TicketNotFoundError,
)
from ticketing.domain.lifecycle import ensure_transition
from ticketing.services.authorization import RedemptionAuthorizer
from ticketing.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)

RECENT_SCANS_LIMIT = 20


@dataclass(frozen=True)
class IssuedTicket:
    """A freshly claimed ticket and the credential to render as a QR code."""

    ticket: Ticket
    credential: str


class TicketService:
    """Service for ticket issuance and redemption."""

    def __init__(
        self,
        store: TicketStore,
        authorizer: RedemptionAuthorizer | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._authorizer = authorizer or RedemptionAuthorizer()
        self._clock = clock

    def claim(self, event_id: str, holder_id: int) -> IssuedTicket:
        """Issue an active ticket for the holder.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            EventNotClaimableError: If the event is unpublished, unapproved or started.
            AlreadyClaimedError: If the holder already has an active or used ticket.
            SoldOutError: If no capacity slot is free.
        """
        event = self._get_event(event_id)
        now = self._clock()
        if not event.is_claimable(now):
            logger.info("Claim refused, event %s not claimable", event.id)
            raise EventNotClaimableError(str(event.id))

        credential = TicketCredential.issue(event.id, holder_id, now)
        payload = credentials.encode(credential)
        ticket = self._store.issue_ticket(credential, payload)
        logger.info("Issued ticket %s for event %s", ticket.ticket_id, event.id)
        return IssuedTicket(ticket=ticket, credential=payload)

    def inspect(self, payload: str, principal: Principal) -> Ticket:
        """Check a credential the way redeem does, without using the ticket."""
        credentials.decode(payload)
        ticket, _ = self._check_redeemable(payload, principal, self._clock())
        return ticket

    def redeem(self, payload: str, principal: Principal) -> Ticket:
        """Mark the ticket behind a credential as used, exactly once.

        Raises:
            MalformedCredentialError: If the payload cannot be parsed.
            TicketNotFoundError: If no ticket was issued with this payload.
            WrongScopeError: If the principal's organization does not own the event.
            TicketNotActiveError: If the ticket is not active, or a concurrent
                scan used it first.
            EventPassedError: If the event has ended.
        """
        credentials.decode(payload)
        return self._redeem(payload, principal)

    def redeem_ticket(self, ticket_id: str, principal: Principal) -> Ticket:
        """Mark a ticket used by its identifier, for manual check-in at the door.

        Goes through the same conditional write as a QR scan.

        Raises:
            InvalidTicketIdError: If the ticket_id is not a valid UUID.
            TicketNotFoundError: If the ticket does not exist.
            WrongScopeError, TicketNotActiveError, EventPassedError: As for redeem.
        """
        ticket = self._get_ticket(ticket_id)
        return self._redeem(ticket.credential, principal)

    def _redeem(self, payload: str, principal: Principal) -> Ticket:
        now = self._clock()
        self._check_redeemable(payload, principal, now)

        used = self._store.mark_used(payload, principal.organization_id, principal.user_id, now)
        if used is None:
            # Something changed since the check; report what, or the lost race.
            self._check_redeemable(payload, principal, now)
            raise TicketNotActiveError(status=TicketStatus.USED.value)

        logger.info("Ticket %s redeemed by user %s", used.ticket_id, principal.user_id)
        return used

    def cancel(self, ticket_id: str, principal: Principal) -> Ticket:
        """Cancel an active ticket, freeing its capacity slot.

        Who may cancel is decided by the caller.

        Raises:
            InvalidTicketIdError: If the ticket_id is not a valid UUID.
            TicketNotFoundError: If the ticket does not exist.
            TicketNotActiveError: If the ticket is already terminal.
        """
        parsed = self._parse_ticket_id(ticket_id)
        cancelled = self._store.cancel_ticket(parsed)
        if cancelled is None:
            ticket = self._store.get_ticket(parsed)
            if ticket is None:
                raise TicketNotFoundError()
            ensure_transition(ticket.status, TicketStatus.CANCELLED)
            raise TicketNotActiveError(status=ticket.status.value)

        logger.info("Ticket %s cancelled by user %s", cancelled.ticket_id, principal.user_id)
        return cancelled

    def capacity_status(self, event_id: str) -> CapacityStatus:
        event = self._get_event(event_id)
        return CapacityStatus.from_counts(event, self._store.count_by_status(event.id))

    def scan_stats(self, event_id: str, principal: Principal) -> ScanStats:
        """Per-status counts for an event, visible to its own organization only."""
        event = self._get_event(event_id)
        self._authorizer.authorize(principal, event)
        counts = self._store.count_by_status(event.id)
        return ScanStats(
            event_id=event.id,
            total=sum(counts.values()),
            active=counts[TicketStatus.ACTIVE],
            used=counts[TicketStatus.USED],
            cancelled=counts[TicketStatus.CANCELLED],
            expired=counts[TicketStatus.EXPIRED],
            hourly=tuple(self._store.redemptions_by_hour(event.id)),
            recent=tuple(self._store.recent_redemptions(event.id, RECENT_SCANS_LIMIT)),
        )

    def tickets_for_holder(self, holder_id: int) -> list[Ticket]:
        return self._store.list_for_holder(holder_id)

    def ticket_for_holder(self, ticket_id: str, holder_id: int) -> Ticket:
        """Return one of the holder's own tickets.

        Raises:
            InvalidTicketIdError: If the ticket_id is not a valid UUID.
            TicketNotFoundError: If the ticket does not exist.
            NotTicketHolderError: If the ticket belongs to someone else.
        """
        ticket = self._get_ticket(ticket_id)
        if ticket.holder_id != holder_id:
            raise NotTicketHolderError()
        return ticket

    def expire_elapsed(self, dry_run: bool = False) -> int:
        """Move active tickets of ended events to expired."""
        now = self._clock()
        if dry_run:
            return self._store.count_expirable(now)
        expired = self._store.expire_tickets(now)
        logger.info("Expired %d tickets of ended events", expired)
        return expired

    def _get_event(self, event_id: str) -> Event:
        try:
            parsed = EventId.from_string(event_id)
        except ValueError as exc:
            raise InvalidEventIdError() from exc

        event = self._store.get_event(parsed)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def _parse_ticket_id(self, ticket_id: str) -> TicketId:
        try:
            return TicketId.from_string(ticket_id)
        except ValueError as exc:
            raise InvalidTicketIdError() from exc

    def _get_ticket(self, ticket_id: str) -> Ticket:
        ticket = self._store.get_ticket(self._parse_ticket_id(ticket_id))
        if ticket is None:
            raise TicketNotFoundError()
        return ticket

    def _check_redeemable(
        self, payload: str, principal: Principal, now: datetime
    ) -> tuple[Ticket, Event]:
        ticket = self._store.find_by_credential(payload)
        if ticket is None:
            raise TicketNotFoundError()
        event = self._store.get_event(ticket.event_id)
        if event is None:
            raise TicketNotFoundError()

        self._authorizer.authorize(principal, event)
        ensure_transition(ticket.status, TicketStatus.USED)
        if event.has_ended(now):
            raise EventPassedError()
        return ticket, event
