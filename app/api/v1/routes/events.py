from typing import Annotated
from fastapi import APIRouter, Depends, status
from app.core.dependencies.clients import gql_dependency, redis_dependency
from app.domain.events.models import CATEGORIES
from app.domain.events.schemas import EventReadDTO, EventsQueryDTO, HomeSectionsReadDTO, SuggestionsQueryDTO
from app.services import event_service

router = APIRouter(tags=["events"])


@router.get(
    "/events",
    status_code=status.HTTP_200_OK,
    response_model=list[EventReadDTO]
)
async def list_events(gql: gql_dependency, r: redis_dependency, query: Annotated[EventsQueryDTO, Depends()]):
    return await event_service.list_event_dtos(gql, r, query.category_filter)


@router.get(
    "/events/categories",
    status_code=status.HTTP_200_OK
)
async def list_categories():
    return list(CATEGORIES)


@router.get(
    "/events/suggestions",
    status_code=status.HTTP_200_OK,
    response_model=list[EventReadDTO]
)
async def search_suggestions(gql: gql_dependency, r: redis_dependency,
                             query: Annotated[SuggestionsQueryDTO, Depends()]):
    return await event_service.search_suggestions(gql, r, query.q)


@router.get(
    "/home/events",
    status_code=status.HTTP_200_OK,
    response_model=HomeSectionsReadDTO
)
async def get_home_sections(gql: gql_dependency, r: redis_dependency):
    return await event_service.get_home_sections(gql, r)


@router.get(
    "/events/{event_id}",
    status_code=status.HTTP_200_OK,
    response_model=EventReadDTO
)
async def get_event(event_id: str, gql: gql_dependency):
    event = await event_service.get_event(gql, event_id)
    return event_service.to_read_dto(event)
