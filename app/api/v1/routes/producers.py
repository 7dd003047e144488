from fastapi import APIRouter, Response, status
from app.core.dependencies.auth import producer_dependency
from app.core.dependencies.clients import gql_dependency, redis_dependency
from app.domain.events.schemas import EventReadDTO
from app.domain.producers.schemas import (CreatedResourceDTO, EventCreateDTO, EventDateCreateDTO, EventStatusReadDTO,
                                          EventStatusUpdateDTO, EventUpdateDTO, LotCreateDTO, ProducerProfileReadDTO,
                                          ScanCountReadDTO, TicketTypeCreateDTO)
from app.domain.tickets.schemas import TicketValidateDTO, TicketValidationResultDTO
from app.services import producer_service

router = APIRouter(tags=["producers"])


@router.get(
    "/producers/{producer_id}/profile",
    status_code=status.HTTP_200_OK,
    response_model=ProducerProfileReadDTO
)
async def get_public_profile(producer_id: str, gql: gql_dependency):
    return await producer_service.get_public_profile(gql, producer_id)


@router.get(
    "/producer/events",
    status_code=status.HTTP_200_OK,
    response_model=list[EventReadDTO]
)
async def list_my_events(gql: gql_dependency, auth: producer_dependency):
    return await producer_service.list_events(gql, auth.token)


@router.post(
    "/producer/events",
    status_code=status.HTTP_201_CREATED,
    response_model=CreatedResourceDTO
)
async def create_event(schema: EventCreateDTO, gql: gql_dependency, r: redis_dependency, auth: producer_dependency,
                       response: Response):
    created = await producer_service.create_event(gql, r, auth.token, schema)
    response.headers["Location"] = f"/producer/events/{created.id}"
    return created


@router.get(
    "/producer/events/{event_id}",
    status_code=status.HTTP_200_OK,
    response_model=EventReadDTO
)
async def get_my_event(event_id: str, gql: gql_dependency, auth: producer_dependency):
    return await producer_service.get_event(gql, auth.token, event_id)


@router.patch(
    "/producer/events/{event_id}",
    status_code=status.HTTP_200_OK,
    response_model=CreatedResourceDTO
)
async def update_event(event_id: str, schema: EventUpdateDTO, gql: gql_dependency, r: redis_dependency,
                       auth: producer_dependency):
    return await producer_service.update_event(gql, r, auth.token, event_id, schema)


@router.post(
    "/producer/events/{event_id}/publish",
    status_code=status.HTTP_200_OK,
    response_model=EventStatusReadDTO
)
async def publish_event(event_id: str, gql: gql_dependency, r: redis_dependency, auth: producer_dependency):
    return await producer_service.publish_event(gql, r, auth.token, event_id)


@router.patch(
    "/producer/events/{event_id}/status",
    status_code=status.HTTP_200_OK,
    response_model=EventStatusReadDTO
)
async def update_event_status(event_id: str, schema: EventStatusUpdateDTO, gql: gql_dependency, r: redis_dependency,
                              auth: producer_dependency):
    return await producer_service.update_event_status(gql, r, auth.token, event_id, schema)


@router.post(
    "/producer/events/{event_id}/dates",
    status_code=status.HTTP_201_CREATED,
    response_model=CreatedResourceDTO
)
async def create_event_date(event_id: str, schema: EventDateCreateDTO, gql: gql_dependency, r: redis_dependency,
                            auth: producer_dependency):
    return await producer_service.create_event_date(gql, r, auth.token, event_id, schema)


@router.post(
    "/producer/dates/{date_id}/lots",
    status_code=status.HTTP_201_CREATED,
    response_model=CreatedResourceDTO
)
async def create_lot(date_id: str, schema: LotCreateDTO, gql: gql_dependency, r: redis_dependency,
                     auth: producer_dependency):
    return await producer_service.create_lot(gql, r, auth.token, date_id, schema)


@router.post(
    "/producer/lots/{lot_id}/ticket-types",
    status_code=status.HTTP_201_CREATED,
    response_model=CreatedResourceDTO
)
async def create_ticket_type(lot_id: str, schema: TicketTypeCreateDTO, gql: gql_dependency, r: redis_dependency,
                             auth: producer_dependency):
    return await producer_service.create_ticket_type(gql, r, auth.token, lot_id, schema)


@router.post(
    "/producer/events/{event_id}/validate",
    status_code=status.HTTP_200_OK,
    response_model=TicketValidationResultDTO
)
async def validate_ticket(event_id: str, schema: TicketValidateDTO, gql: gql_dependency, r: redis_dependency,
                          auth: producer_dependency):
    return await producer_service.validate_ticket(gql, r, auth.token, auth.user.id, event_id, schema)


@router.get(
    "/producer/events/{event_id}/scans",
    status_code=status.HTTP_200_OK,
    response_model=ScanCountReadDTO
)
async def get_scan_count(event_id: str, r: redis_dependency, auth: producer_dependency):
    return await producer_service.get_scan_count(r, auth.user.id, event_id)


@router.delete(
    "/producer/events/{event_id}/scans",
    status_code=status.HTTP_200_OK,
    response_model=ScanCountReadDTO
)
async def reset_scan_count(event_id: str, r: redis_dependency, auth: producer_dependency):
    return await producer_service.reset_scan_count(r, auth.user.id, event_id)
