from ticketing.services.authorization import RedemptionAuthorizer
from ticketing.services.ticket_service import IssuedTicket, TicketService

__all__ = ["IssuedTicket", "RedemptionAuthorizer", "TicketService"]
