"""Capacity ledger rules.

Issued capacity is always derived from ticket counts and never stored.
Stores call ``reserve_slot`` inside the same atomic unit that inserts the
ticket.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Self

from ticketing.domain.errors import SoldOutError
from ticketing.domain.lifecycle import TicketStatus
from ticketing.domain.models import Event


def issued_count(counts: Mapping[TicketStatus, int]) -> int:
    return sum(counts.get(status, 0) for status in TicketStatus.occupying())


def reserve_slot(event: Event, issued: int) -> None:
    """Raise SoldOutError unless a slot is free.

    Refuses whenever ``issued >= capacity``, including a zero capacity.
    """
    if issued >= event.capacity.value:
        raise SoldOutError(str(event.id))


@dataclass(frozen=True)
class CapacityStatus:
    issued: int
    remaining: int
    capacity: int

    @classmethod
    def from_counts(cls, event: Event, counts: Mapping[TicketStatus, int]) -> Self:
        issued = issued_count(counts)
        capacity = event.capacity.value
        return cls(issued=issued, remaining=max(capacity - issued, 0), capacity=capacity)
