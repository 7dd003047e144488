import hashlib
import json
import logging
from datetime import date, datetime, timezone
from typing import Any
import redis.asyncio as redis
from pydantic import ValidationError
from app.core.config import EVENTS_CACHE_TTL_SECONDS, SUGGESTIONS_MIN_QUERY, SUGGESTIONS_MAX_RESULTS
from app.core.graphql import GraphQLClient
from app.domain.events import crud
from app.domain.events.classification import (HomeSectionsMemo, badge_for, get_event_sale_status, is_event_active,
                                              is_event_new, lowest_price)
from app.domain.events.models import Event
from app.domain.events.schemas import EventReadDTO, HomeSectionsReadDTO, map_api_event
from app.domain.exceptions import NotFound, UpstreamError

logger = logging.getLogger("app.events")

_home_memo = HomeSectionsMemo()


def _cache_key(category: str | None) -> str:
    return f"events:{category or 'all'}"


async def _cache_get(r: redis.Redis | None, key: str) -> str | None:
    if r is None:
        return None
    try:
        return await r.get(key)
    except redis.RedisError:
        logger.warning("Event cache read failed key=%s", key, exc_info=True)
        return None


async def _cache_set(r: redis.Redis | None, key: str, payload: str) -> None:
    if r is None:
        return
    try:
        await r.set(key, payload, ex=EVENTS_CACHE_TTL_SECONDS)
    except redis.RedisError:
        logger.warning("Event cache write failed key=%s", key, exc_info=True)


async def _load_events_payload(gql: GraphQLClient, r: redis.Redis | None,
                               category: str | None) -> tuple[str, list[dict[str, Any]]]:
    key = _cache_key(category)
    cached = await _cache_get(r, key)
    if cached is not None:
        return cached, json.loads(cached)

    raw = await crud.list_events(gql, category)
    payload = json.dumps(raw, sort_keys=True, separators=(",", ":"))
    await _cache_set(r, key, payload)
    return payload, raw


def map_event(raw: dict[str, Any]) -> Event:
    try:
        return map_api_event(raw)
    except ValidationError as e:
        raise UpstreamError("Evento inválido recebido da API", ctx={"event_id": raw.get("id")}) from e


def map_events(raw_events: list[dict[str, Any]]) -> list[Event]:
    events = []
    for item in raw_events:
        try:
            events.append(map_api_event(item))
        except ValidationError as e:
            logger.warning("Skipping malformed event id=%s errors=%d", (item or {}).get("id"), e.error_count())
    return events


def to_read_dto(event: Event, *, today: date | None = None, now: datetime | None = None,
                show_new: bool = False) -> EventReadDTO:
    now = now or datetime.now(timezone.utc)
    new = is_event_new(event, now)
    return EventReadDTO(
        event=event,
        sale_status=get_event_sale_status(event),
        badge=badge_for(event, show_new=show_new and new),
        is_active=is_event_active(event, today),
        is_new=new,
        lowest_price=lowest_price(event),
    )


async def list_events(gql: GraphQLClient, r: redis.Redis | None, category: str | None = None) -> list[Event]:
    _, raw = await _load_events_payload(gql, r, category)
    return map_events(raw)


async def list_event_dtos(gql: GraphQLClient, r: redis.Redis | None, category: str | None = None) -> list[EventReadDTO]:
    today = date.today()
    now = datetime.now(timezone.utc)
    return [to_read_dto(e, today=today, now=now) for e in await list_events(gql, r, category)]


async def get_event(gql: GraphQLClient, event_id: str) -> Event:
    raw = await crud.get_event(gql, event_id)
    if not raw:
        raise NotFound("Evento não encontrado", ctx={"event_id": event_id})
    return map_event(raw)


async def get_home_sections(gql: GraphQLClient, r: redis.Redis | None) -> HomeSectionsReadDTO:
    payload, raw = await _load_events_payload(gql, r, None)
    fingerprint = hashlib.sha256(payload.encode()).hexdigest()
    today = date.today()
    now = datetime.now(timezone.utc)
    sections = _home_memo.get(fingerprint, map_events(raw), today)

    def dtos(events: list[Event], *, show_new: bool = False) -> list[EventReadDTO]:
        return [to_read_dto(e, today=today, now=now, show_new=show_new) for e in events]

    return HomeSectionsReadDTO(
        featured=dtos(sections.featured),
        trending=dtos(sections.trending),
        upcoming=dtos(sections.upcoming),
        recent=dtos(sections.recent, show_new=True),
        all=dtos(sections.all),
    )


def match_suggestions(events: list[Event], query: str, *, max_results: int = SUGGESTIONS_MAX_RESULTS) -> list[Event]:
    normalized = (query or "").lower().strip()
    if len(normalized) < SUGGESTIONS_MIN_QUERY:
        return []
    return [
        e for e in events
        if normalized in e.name.lower() or normalized in e.location.lower() or normalized in e.category.lower()
    ][:max_results]


async def search_suggestions(gql: GraphQLClient, r: redis.Redis | None, query: str) -> list[EventReadDTO]:
    if len((query or "").strip()) < SUGGESTIONS_MIN_QUERY:
        return []
    events = await list_events(gql, r)
    return [to_read_dto(e) for e in match_suggestions(events, query)]
