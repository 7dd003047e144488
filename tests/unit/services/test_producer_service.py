import pytest
from app.domain.exceptions import GraphQLRequestError, NotFound, Unprocessable
from app.domain.producers.schemas import EventCreateDTO, EventStatusUpdateDTO, ProducerEventStatus
from app.domain.tickets.schemas import TicketValidateDTO
from app.services import producer_service
from tests.helper import api_event, gql_with, redis_mock


def _scan_iter(*keys):
    async def _iter(match=None):
        for key in keys:
            yield key
    return _iter


def _create_dto() -> EventCreateDTO:
    return EventCreateDTO(title="  Festa  ", description="Uma festa muito boa", category="festas",
                          cover_image="https://img/c.jpg", location="Recife", address="  ")


@pytest.mark.asyncio
async def test_create_event_sends_input_and_invalidates_cache(mocker, auditspan_stub):
    gql = gql_with(mocker, mutate={"createEvent": {"id": "ev1", "title": "Festa", "status": "DRAFT"}})
    r = redis_mock(mocker)
    r.scan_iter = _scan_iter("events:all", "events:festas")

    created = await producer_service.create_event(gql, r, "tok", _create_dto())

    assert created.id == "ev1"
    variables = gql.mutate.await_args.args[1]
    assert variables["input"]["title"] == "Festa"
    assert variables["input"]["coverImage"] == "https://img/c.jpg"
    assert variables["input"]["address"] is None
    r.delete.assert_awaited_once_with("events:all", "events:festas")
    assert auditspan_stub[0].object_id == "ev1"


@pytest.mark.asyncio
async def test_create_event_graphql_error_raises_unprocessable(mocker):
    gql = gql_with(mocker)
    gql.mutate.side_effect = GraphQLRequestError(["category invalid"])

    with pytest.raises(Unprocessable, match="category invalid"):
        await producer_service.create_event(gql, None, "tok", _create_dto())


@pytest.mark.asyncio
async def test_update_status_unknown_event_raises_not_found(mocker):
    gql = gql_with(mocker, mutate={"updateEventStatus": None})

    with pytest.raises(NotFound):
        await producer_service.update_event_status(gql, None, "tok", "ev1",
                                                   EventStatusUpdateDTO(status=ProducerEventStatus.PAUSED))
    assert gql.mutate.await_args.args[1] == {"id": "ev1", "status": "PAUSED"}


@pytest.mark.asyncio
async def test_list_events_maps_and_classifies(mocker):
    gql = gql_with(mocker, query={"producerEvents": [api_event("e1"), api_event("e2")]})

    events = await producer_service.list_events(gql, "tok")

    assert [d.event.id for d in events] == ["e1", "e2"]
    assert all(d.badge == "Esgotado" for d in events)


@pytest.mark.asyncio
async def test_public_profile_not_found(mocker):
    gql = gql_with(mocker, query={"producerPublicProfile": None})
    with pytest.raises(NotFound, match="Perfil não encontrado."):
        await producer_service.get_public_profile(gql, "p1")


@pytest.mark.asyncio
async def test_public_profile_maps_producer_and_events(mocker):
    gql = gql_with(mocker, query={"producerPublicProfile": {
        "producer": {"id": "p1", "user": {"id": "u1", "name": "Casa de Shows", "photoUrl": None},
                     "companyName": "CDS Ltda"},
        "events": [api_event("e1")],
    }})

    profile = await producer_service.get_public_profile(gql, "p1")

    assert profile.name == "Casa de Shows"
    assert profile.company_name == "CDS Ltda"
    assert [d.event.id for d in profile.events] == ["e1"]


@pytest.mark.asyncio
async def test_validate_ticket_success_increments_scan_counter(mocker):
    gql = gql_with(mocker, mutate={"validateTicket": {
        "success": True, "errorCode": None, "message": None,
        "ticket": {"id": "t1", "ticketType": {"name": "Pista"}, "owner": {"name": "Ana"}},
    }})
    r = redis_mock(mocker)
    r.incr.return_value = 4

    result = await producer_service.validate_ticket(gql, r, "tok", "u1", "ev1", TicketValidateDTO(qr_code=" QR "))

    assert result.success is True
    assert result.scan_count == 4
    assert result.holder_name == "Ana"
    assert result.ticket_type == "Pista"
    r.incr.assert_awaited_once_with("scan_count:u1:ev1")
    assert gql.mutate.await_args.args[1] == {"eventId": "ev1", "qrCode": "QR"}


@pytest.mark.asyncio
async def test_validate_ticket_rejection_keeps_counter(mocker):
    gql = gql_with(mocker, mutate={"validateTicket": {
        "success": False, "errorCode": "ALREADY_USED", "message": "Ingresso já utilizado", "ticket": None,
    }})
    r = redis_mock(mocker, get="2")

    result = await producer_service.validate_ticket(gql, r, "tok", "u1", "ev1", TicketValidateDTO(qr_code="QR"))

    assert result.success is False
    assert result.error_code == "ALREADY_USED"
    assert result.message == "Ingresso já utilizado"
    assert result.scan_count == 2
    r.incr.assert_not_awaited()


@pytest.mark.asyncio
async def test_validate_ticket_graphql_error_is_reported_as_failed_scan(mocker):
    gql = gql_with(mocker)
    gql.mutate.side_effect = GraphQLRequestError(["Ingresso de outro evento"], codes=["WRONG_EVENT"])

    result = await producer_service.validate_ticket(gql, redis_mock(mocker), "tok", "u1", "ev1",
                                                    TicketValidateDTO(qr_code="QR"))

    assert result.success is False
    assert result.error_code == "WRONG_EVENT"
    assert result.scan_count == 0


@pytest.mark.asyncio
async def test_scan_count_read_and_reset(mocker):
    r = redis_mock(mocker, get="7")

    assert (await producer_service.get_scan_count(r, "u1", "ev1")).count == 7
    assert (await producer_service.reset_scan_count(r, "u1", "ev1")).count == 0
    r.delete.assert_awaited_once_with("scan_count:u1:ev1")
