from django.urls import path

from ticketing.handlers import (
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

urlpatterns = [
    path("tickets/claim", ClaimTicketView.as_view(), name="ticket-claim"),
    path("tickets/my", MyTicketsView.as_view(), name="ticket-my"),
    path("tickets/validate", ValidateTicketView.as_view(), name="ticket-validate"),
    path("tickets/scan", ScanTicketView.as_view(), name="ticket-scan"),
    path("tickets/<str:ticket_id>", TicketDetailView.as_view(), name="ticket-detail"),
    path("tickets/<str:ticket_id>/use", UseTicketView.as_view(), name="ticket-use"),
    path("tickets/<str:ticket_id>/cancel", CancelTicketView.as_view(), name="ticket-cancel"),
    path("events/<str:event_id>/capacity", CapacityStatusView.as_view(), name="event-capacity"),
    path("events/<str:event_id>/scan-stats", ScanStatsView.as_view(), name="event-scan-stats"),
]
