from ticketing.stores.django_store import DjangoTicketStore
from ticketing.stores.interfaces import TicketStore
from ticketing.stores.memory_store import InMemoryTicketStore

__all__ = ["TicketStore", "DjangoTicketStore", "InMemoryTicketStore"]
