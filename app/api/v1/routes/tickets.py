from datetime import date
from typing import Annotated
from fastapi import APIRouter, Depends, status
from app.core.dependencies.auth import auth_dependency, get_session_store
from app.domain.tickets.schemas import TicketListDTO, TicketReadDTO, TicketsQueryDTO
from app.domain.tickets.search import search_tickets, ticket_status
from app.services.session_service import SessionStore

router = APIRouter(tags=["tickets"])
sessions_dependency = Annotated[SessionStore, Depends(get_session_store)]


def _ticket_list(tickets, q: str | None) -> TicketListDTO:
    today = date.today()
    found = search_tickets(tickets, q, today)
    return TicketListDTO(
        items=[TicketReadDTO(ticket=t, status=ticket_status(t, today)) for t in found],
        total=len(tickets),
        is_filtering=bool((q or "").strip()),
    )


@router.get(
    "/users/me/tickets",
    status_code=status.HTTP_200_OK,
    response_model=TicketListDTO
)
async def list_my_tickets(auth: auth_dependency, query: Annotated[TicketsQueryDTO, Depends()]):
    return _ticket_list(auth.session.tickets, query.q)


@router.post(
    "/users/me/tickets/refresh",
    status_code=status.HTTP_200_OK,
    response_model=TicketListDTO
)
async def refresh_my_tickets(auth: auth_dependency, sessions: sessions_dependency):
    return _ticket_list(await sessions.refresh_tickets(auth.token), None)
