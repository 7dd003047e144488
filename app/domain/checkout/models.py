from pydantic import BaseModel, ConfigDict
from app.core.config import MAX_TICKETS_PER_SELECTION
from app.domain.events.models import Event, EventDate, TicketType, TicketTypeVariant
from app.domain.exceptions import NotFound, Unprocessable


class TicketSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    event: Event
    date: EventDate
    ticket: TicketType
    variant: TicketTypeVariant
    quantity: int

    @property
    def subtotal(self) -> float:
        return self.variant.price * self.quantity


def max_selectable(available: int, limit: int = MAX_TICKETS_PER_SELECTION) -> int:
    return max(0, min(limit, available))


def clamp_quantity(quantity: int, available: int, limit: int = MAX_TICKETS_PER_SELECTION) -> int:
    upper = max_selectable(available, limit)
    if upper == 0:
        return 0
    return max(1, min(quantity, upper))


def build_selection(event: Event, date_id: str, variant_id: str, quantity: int) -> TicketSelection:
    event_date = event.find_date(date_id)
    if event_date is None:
        raise NotFound("Data do evento não encontrada", ctx={"event_id": event.id, "date_id": date_id})

    found = event.find_variant(variant_id)
    if found is None:
        raise NotFound("Ingresso não encontrado", ctx={"event_id": event.id, "variant_id": variant_id})
    ticket, variant = found

    if variant.available <= 0:
        raise Unprocessable("Ingresso esgotado", ctx={"variant_id": variant_id, "available": variant.available})

    return TicketSelection(
        event=event,
        date=event_date,
        ticket=ticket,
        variant=variant,
        quantity=clamp_quantity(quantity, variant.available),
    )
