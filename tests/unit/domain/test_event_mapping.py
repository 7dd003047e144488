from app.domain.events.models import LotStatus, NO_LOT
from app.domain.events.schemas import map_api_event, EventsQueryDTO
from tests.helper import api_event, api_ticket_type


def _lot(id="l1", *, active=True, available=100, ticket_types=None):
    return {"id": id, "name": "1º Lote", "active": active, "availableQuantity": available, "totalQuantity": 200,
            "ticketTypes": ticket_types}


def test_map_api_event_groups_ticket_types_by_name():
    raw = api_event(lots=[_lot(ticket_types=[
        api_ticket_type("t1", "Pista", audience="MALE", price=100, max_quantity=50, sold_quantity=10),
        api_ticket_type("t2", "Pista", audience="FEMALE", price=80, max_quantity=50, sold_quantity=50),
        api_ticket_type("t3", "VIP", price=300, max_quantity=20),
    ])])

    event = map_api_event(raw)

    assert event.name == "Festival de Verão"
    assert event.featured is False
    assert event.address == ""
    assert event.dates[0].time == "20:00"
    assert event.current_lot.status == LotStatus.ACTIVE
    assert [t.name for t in event.current_lot.tickets] == ["Pista", "VIP"]
    pista = event.current_lot.tickets[0]
    assert [(v.id, v.available, v.total) for v in pista.variants] == [("t1", 40, 50), ("t2", 0, 50)]
    assert pista.variants[1].audience_label == "Feminino"


def test_map_api_event_skips_inactive_and_empty_lots():
    raw = api_event(lots=[
        _lot("inactive", active=False, ticket_types=[api_ticket_type("x")]),
        _lot("empty", ticket_types=[]),
    ])
    assert map_api_event(raw).current_lot == NO_LOT


def test_map_api_event_marks_exhausted_lot_sold_out():
    raw = api_event(lots=[_lot(available=0, ticket_types=[api_ticket_type("t1")])])
    assert map_api_event(raw).current_lot.status == LotStatus.SOLD_OUT


def test_map_api_event_producer_name_defaults():
    raw = api_event(producer={"id": "p1", "user": None})
    assert map_api_event(raw).producer.name == "Produtor"


def test_events_query_category_filter():
    assert EventsQueryDTO(category="all").category_filter is None
    assert EventsQueryDTO(category="  ").category_filter is None
    assert EventsQueryDTO(category="shows").category_filter == "shows"
