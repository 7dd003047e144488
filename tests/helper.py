from app.domain.events.models import Event, EventDate, Lot, LotStatus, NO_LOT, TicketType, TicketTypeVariant


def make_variant(available: int, total: int, *, id: str = "v1", price: float = 50.0,
                 audience: str = "GENERAL") -> TicketTypeVariant:
    return TicketTypeVariant(id=id, audience=audience, price=price, available=available, total=total)


def make_event(id: str = "e1", *, dates: tuple[str, ...] = ("2025-02-01",), variants=None,
               lot_status: LotStatus = LotStatus.ACTIVE, featured: bool = False, name: str = "Show",
               location: str = "São Paulo", category: str = "shows") -> Event:
    if variants is None:
        variants = [make_variant(50, 100)]
    lot = Lot(id="lot1", name="1º Lote", status=lot_status,
              tickets=[TicketType(name="Pista", variants=list(variants))]) if variants else NO_LOT
    return Event(
        id=id,
        name=name,
        category=category,
        location=location,
        dates=[EventDate(id=f"{id}-d{i}", date=d) for i, d in enumerate(dates)],
        current_lot=lot,
        featured=featured,
    )


def api_ticket_type(id: str, name: str = "Pista", *, audience: str = "GENERAL", price: float = 80,
                    max_quantity: int = 100, sold_quantity: int = 0) -> dict:
    return {"id": id, "name": name, "price": price, "audience": audience,
            "maxQuantity": max_quantity, "soldQuantity": sold_quantity}


def api_event(id: str = "e1", *, lots=None, date: str = "2025-02-01", **override) -> dict:
    data = {
        "id": id,
        "title": "Festival de Verão",
        "description": "Uma noite inteira",
        "category": "festivais",
        "coverImage": "https://img/cover.jpg",
        "location": "Rio de Janeiro",
        "address": None,
        "status": "PUBLISHED",
        "featured": None,
        "dates": [{"id": f"{id}-d1", "date": date, "startTime": "20:00", "endTime": None,
                   "lots": lots if lots is not None else []}],
    }
    data.update(override)
    return data


def gql_with(mocker, *, query=None, mutate=None):
    gql = mocker.Mock()
    gql.query = mocker.AsyncMock(return_value=query if query is not None else {})
    gql.mutate = mocker.AsyncMock(return_value=mutate if mutate is not None else {})
    return gql


def redis_mock(mocker, *, get=None):
    r = mocker.Mock()
    r.get = mocker.AsyncMock(return_value=get)
    r.set = mocker.AsyncMock(return_value=True)
    r.delete = mocker.AsyncMock(return_value=1)
    r.incr = mocker.AsyncMock(return_value=1)
    r.expire = mocker.AsyncMock(return_value=True)
    return r
