"""Ticket status state machine.

``active`` is the only initial state. ``used``, ``cancelled`` and ``expired``
are terminal: nothing leaves them.
"""

from enum import Enum

from ticketing.domain.errors import TicketNotActiveError


class TicketStatus(str, Enum):
    ACTIVE = "active"
    USED = "used"
    CANCELLED = "cancelled"
    EXPIRED = "expired"

    @classmethod
    def occupying(cls) -> frozenset["TicketStatus"]:
        """Statuses that hold a capacity slot and count toward the one-per-holder rule."""
        return frozenset({cls.ACTIVE, cls.USED})

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self]


TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.ACTIVE: frozenset(
        {TicketStatus.USED, TicketStatus.CANCELLED, TicketStatus.EXPIRED}
    ),
    TicketStatus.USED: frozenset(),
    TicketStatus.CANCELLED: frozenset(),
    TicketStatus.EXPIRED: frozenset(),
}


def can_transition(current: TicketStatus, target: TicketStatus) -> bool:
    return target in TRANSITIONS[current]


def ensure_transition(current: TicketStatus, target: TicketStatus) -> None:
    """Raise TicketNotActiveError unless ``current -> target`` is allowed."""
    if not can_transition(current, target):
        raise TicketNotActiveError(status=current.value)
