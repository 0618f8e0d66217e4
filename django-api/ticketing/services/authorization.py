"""Organization-scoped authorization for redemption."""

from ticketing.domain import Event, Principal
from ticketing.domain.errors import WrongScopeError


class RedemptionAuthorizer:
    """Confirms a principal acts for the organization that owns an event.

    Ticket identifiers are globally unique, so without this check staff of one
    organization could redeem another organization's tickets.
    """

    def authorize(self, principal: Principal, event: Event) -> None:
        """Raises WrongScopeError unless the principal's organization owns the event."""
        if principal.organization_id is None or principal.organization_id != event.organization_id:
            raise WrongScopeError()
