import logging
from datetime import date, datetime, timezone
import redis.asyncio as redis
from app.core.auditing import AuditSpan
from app.core.graphql import GraphQLClient
from app.domain.events import crud as events_crud
from app.domain.events.schemas import EventReadDTO
from app.domain.exceptions import GraphQLRequestError, NotFound, Unprocessable
from app.domain.producers import crud
from app.domain.producers.schemas import (CreatedResourceDTO, EventCreateDTO, EventDateCreateDTO, EventStatusReadDTO,
                                          EventStatusUpdateDTO, EventUpdateDTO, LotCreateDTO, ProducerProfileReadDTO,
                                          ScanCountReadDTO, TicketTypeCreateDTO)
from app.domain.tickets import crud as tickets_crud
from app.domain.tickets.schemas import TicketValidateDTO, TicketValidationResultDTO
from app.services.event_service import map_event, map_events, to_read_dto

logger = logging.getLogger("app.producers")

SCAN_COUNT_TTL_SECONDS = 60 * 60 * 24
VALIDATION_FAILED = "Ingresso inválido"


def _scan_key(producer_id: str, event_id: str) -> str:
    return f"scan_count:{producer_id}:{event_id}"


def _unprocessable(e: GraphQLRequestError, **ctx) -> Unprocessable:
    return Unprocessable(e.messages[0] if e.messages else "Operação não permitida", ctx=ctx)


async def _invalidate_event_cache(r: redis.Redis | None) -> None:
    if r is None:
        return
    try:
        keys = [key async for key in r.scan_iter(match="events:*")]
        if keys:
            await r.delete(*keys)
    except redis.RedisError:
        logger.warning("Event cache invalidation failed", exc_info=True)


def _dtos(raw_events: list[dict]) -> list[EventReadDTO]:
    today = date.today()
    now = datetime.now(timezone.utc)
    return [to_read_dto(event, today=today, now=now) for event in map_events(raw_events)]


def _created(result: dict | None, what: str, **ctx) -> CreatedResourceDTO:
    if not result or not result.get("id"):
        raise Unprocessable(f"Erro ao criar {what}", ctx=ctx)
    return CreatedResourceDTO(id=str(result["id"]))


async def list_events(gql: GraphQLClient, token: str) -> list[EventReadDTO]:
    return _dtos(await crud.producer_events(gql, token))


async def get_event(gql: GraphQLClient, token: str, event_id: str) -> EventReadDTO:
    raw = await events_crud.get_event(gql, event_id, token=token)
    if not raw:
        raise NotFound("Evento não encontrado", ctx={"event_id": event_id})
    return to_read_dto(map_event(raw))


async def get_public_profile(gql: GraphQLClient, producer_id: str) -> ProducerProfileReadDTO:
    raw = await crud.public_profile(gql, producer_id)
    if not raw or not raw.get("producer"):
        raise NotFound("Perfil não encontrado.", ctx={"producer_id": producer_id})

    producer = raw["producer"]
    user = producer.get("user") or {}
    return ProducerProfileReadDTO(
        id=str(producer["id"]),
        name=user.get("name") or "Produtor",
        photo_url=user.get("photoUrl"),
        company_name=producer.get("companyName"),
        events=_dtos(raw.get("events") or []),
    )


async def create_event(gql: GraphQLClient, r: redis.Redis | None, token: str,
                       schema: EventCreateDTO) -> CreatedResourceDTO:
    async with AuditSpan(scope="PRODUCER", action="CREATE_EVENT", object_type="event") as span:
        try:
            result = await crud.create_event(gql, token, schema.to_api())
        except GraphQLRequestError as e:
            raise _unprocessable(e, title=schema.title) from e
        created = _created(result, "evento", title=schema.title)
        span.object_id = span.event_id = created.id

    await _invalidate_event_cache(r)
    return created


async def update_event(gql: GraphQLClient, r: redis.Redis | None, token: str, event_id: str,
                       schema: EventUpdateDTO) -> CreatedResourceDTO:
    payload = schema.to_api()
    async with AuditSpan(scope="PRODUCER", action="UPDATE_EVENT", object_type="event", object_id=event_id,
                         event_id=event_id, meta={"fields": sorted(payload)}):
        try:
            result = await crud.update_event(gql, token, event_id, payload)
        except GraphQLRequestError as e:
            raise _unprocessable(e, event_id=event_id) from e
        if not result:
            raise NotFound("Evento não encontrado", ctx={"event_id": event_id})

    await _invalidate_event_cache(r)
    return CreatedResourceDTO(id=event_id)


async def publish_event(gql: GraphQLClient, r: redis.Redis | None, token: str, event_id: str) -> EventStatusReadDTO:
    async with AuditSpan(scope="PRODUCER", action="PUBLISH_EVENT", object_type="event", object_id=event_id,
                         event_id=event_id):
        try:
            result = await crud.publish_event(gql, token, event_id)
        except GraphQLRequestError as e:
            raise _unprocessable(e, event_id=event_id) from e
        if not result:
            raise NotFound("Evento não encontrado", ctx={"event_id": event_id})

    await _invalidate_event_cache(r)
    return EventStatusReadDTO(id=str(result["id"]), status=result.get("status") or "")


async def update_event_status(gql: GraphQLClient, r: redis.Redis | None, token: str, event_id: str,
                              schema: EventStatusUpdateDTO) -> EventStatusReadDTO:
    async with AuditSpan(scope="PRODUCER", action="UPDATE_EVENT_STATUS", object_type="event", object_id=event_id,
                         event_id=event_id, meta={"status": schema.status.value}):
        try:
            result = await crud.update_event_status(gql, token, event_id, schema.status.value)
        except GraphQLRequestError as e:
            raise _unprocessable(e, event_id=event_id, status=schema.status.value) from e
        if not result:
            raise NotFound("Evento não encontrado", ctx={"event_id": event_id})

    await _invalidate_event_cache(r)
    return EventStatusReadDTO(id=str(result["id"]), status=result.get("status") or schema.status.value)


async def create_event_date(gql: GraphQLClient, r: redis.Redis | None, token: str, event_id: str,
                            schema: EventDateCreateDTO) -> CreatedResourceDTO:
    async with AuditSpan(scope="PRODUCER", action="CREATE_EVENT_DATE", object_type="event_date",
                         event_id=event_id) as span:
        try:
            result = await crud.create_event_date(gql, token, event_id, schema.to_api())
        except GraphQLRequestError as e:
            raise _unprocessable(e, event_id=event_id) from e
        created = _created(result, "data", event_id=event_id)
        span.object_id = created.id

    await _invalidate_event_cache(r)
    return created


async def create_lot(gql: GraphQLClient, r: redis.Redis | None, token: str, date_id: str,
                     schema: LotCreateDTO) -> CreatedResourceDTO:
    async with AuditSpan(scope="PRODUCER", action="CREATE_LOT", object_type="lot",
                         meta={"date_id": date_id}) as span:
        try:
            result = await crud.create_lot(gql, token, date_id, schema.to_api())
        except GraphQLRequestError as e:
            raise _unprocessable(e, date_id=date_id) from e
        created = _created(result, "lote", date_id=date_id)
        span.object_id = created.id

    await _invalidate_event_cache(r)
    return created


async def create_ticket_type(gql: GraphQLClient, r: redis.Redis | None, token: str, lot_id: str,
                             schema: TicketTypeCreateDTO) -> CreatedResourceDTO:
    async with AuditSpan(scope="PRODUCER", action="CREATE_TICKET_TYPE", object_type="ticket_type",
                         meta={"lot_id": lot_id}) as span:
        try:
            result = await crud.create_ticket_type(gql, token, lot_id, schema.to_api())
        except GraphQLRequestError as e:
            raise _unprocessable(e, lot_id=lot_id) from e
        created = _created(result, "ingresso", lot_id=lot_id)
        span.object_id = created.id

    await _invalidate_event_cache(r)
    return created


async def get_scan_count(r: redis.Redis, producer_id: str, event_id: str) -> ScanCountReadDTO:
    raw = await r.get(_scan_key(producer_id, event_id))
    return ScanCountReadDTO(event_id=event_id, count=int(raw or 0))


async def reset_scan_count(r: redis.Redis, producer_id: str, event_id: str) -> ScanCountReadDTO:
    await r.delete(_scan_key(producer_id, event_id))
    return ScanCountReadDTO(event_id=event_id, count=0)


async def validate_ticket(gql: GraphQLClient, r: redis.Redis, token: str, producer_id: str, event_id: str,
                          schema: TicketValidateDTO) -> TicketValidationResultDTO:
    async with AuditSpan(scope="PRODUCER", action="VALIDATE_TICKET", object_type="ticket",
                         event_id=event_id) as span:
        try:
            result = await tickets_crud.validate_ticket(gql, token, event_id, schema.qr_code)
        except GraphQLRequestError as e:
            result = {"success": False, "errorCode": (e.codes or [None])[0], "message": e.messages[0]}
        result = result or {}

        ticket = result.get("ticket") or {}
        key = _scan_key(producer_id, event_id)
        if result.get("success"):
            count = await r.incr(key)
            await r.expire(key, SCAN_COUNT_TTL_SECONDS)
            span.object_id = ticket.get("id")
        else:
            count = int(await r.get(key) or 0)
            span.meta["error_code"] = result.get("errorCode")

    return TicketValidationResultDTO(
        success=bool(result.get("success")),
        error_code=result.get("errorCode"),
        message=result.get("message") or ("Ingresso validado" if result.get("success") else VALIDATION_FAILED),
        holder_name=(ticket.get("owner") or {}).get("name"),
        ticket_type=(ticket.get("ticketType") or {}).get("name"),
        scan_count=count,
    )
