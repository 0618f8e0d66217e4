from ticketing.handlers.views import (
    CancelTicketView,
    CapacityStatusView,
    ClaimTicketView,
    MyTicketsView,
    ScanStatsView,
    ScanTicketView,
    TicketDetailView,
    UseTicketView,
    ValidateTicketView,
)

__all__ = [
    "CancelTicketView",
    "CapacityStatusView",
    "ClaimTicketView",
    "MyTicketsView",
    "ScanStatsView",
    "ScanTicketView",
    "TicketDetailView",
    "UseTicketView",
    "ValidateTicketView",
]
