"""Accent-insensitive search over the ticket wallet."""
from datetime import date
from app.core.utils.text_utils import fold_text, split_terms
from app.domain.events.classification import parse_event_datetime
from app.domain.tickets.models import Ticket

MONTHS_PT = ("janeiro", "fevereiro", "março", "abril", "maio", "junho", "julho",
             "agosto", "setembro", "outubro", "novembro", "dezembro")

TICKET_ACTIVE = "ativo"
TICKET_EXPIRED = "expirado"


def format_date_long_pt(value: str) -> str:
    parsed = parse_event_datetime(value)
    if parsed is None:
        return value or ""
    return f"{parsed.day:02d} de {MONTHS_PT[parsed.month - 1]} de {parsed.year}"


def ticket_status(ticket: Ticket, today: date | None = None) -> str:
    parsed = parse_event_datetime(ticket.date)
    if parsed is None:
        return TICKET_ACTIVE
    today = today or date.today()
    return TICKET_EXPIRED if parsed.date() < today else TICKET_ACTIVE


def _searchable_text(ticket: Ticket, today: date) -> str:
    fields = [
        ticket.event_name,
        ticket.location,
        ticket.ticket_type,
        ticket.qr_code,
        ticket.holder_name,
        ticket.date,
        ticket.time,
        format_date_long_pt(ticket.date),
        ticket_status(ticket, today),
    ]
    return fold_text(" ".join(fields))


def search_tickets(tickets: list[Ticket], query: str | None, today: date | None = None) -> list[Ticket]:
    terms = split_terms(query)
    if not terms:
        return list(tickets)
    today = today or date.today()
    # every term has to match somewhere
    return [t for t in tickets if all(term in _searchable_text(t, today) for term in terms)]
