from .events.models import Event, EventDate, Lot, TicketType, TicketTypeVariant
from .payments.models import PixPayment, PaymentStatus
from .tickets.models import Ticket
from .users.models import User

__all__ = (
    "Event", "EventDate", "Lot", "TicketType", "TicketTypeVariant", "PixPayment", "PaymentStatus", "Ticket", "User"
)
