from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from app.core.utils.text_utils import strip_text
from app.domain.events.models import (Event, EventDate, EventProducer, EventSaleStatus, Lot, LotStatus, NO_LOT,
                                      TicketType, TicketTypeVariant)


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ApiTicketTypeDTO(_ApiModel):
    id: str
    name: str
    description: str | None = None
    price: float = 0
    audience: str = "GENERAL"
    max_quantity: int = 0
    sold_quantity: int = 0


class ApiLotDTO(_ApiModel):
    id: str
    name: str
    active: bool = False
    available_quantity: int = 0
    total_quantity: int = 0
    starts_at: str | None = None
    ends_at: str | None = None
    ticket_types: list[ApiTicketTypeDTO] | None = None


class ApiEventDateDTO(_ApiModel):
    id: str
    date: str
    start_time: str | None = None
    end_time: str | None = None
    lots: list[ApiLotDTO] | None = None


class ApiProducerUserDTO(_ApiModel):
    id: str
    name: str
    photo_url: str | None = None


class ApiProducerDTO(_ApiModel):
    id: str
    user: ApiProducerUserDTO | None = None
    company_name: str | None = None


class ApiEventDTO(_ApiModel):
    id: str
    title: str
    description: str | None = ""
    category: str | None = ""
    cover_image: str | None = ""
    location: str | None = ""
    address: str | None = None
    status: str | None = None
    featured: bool | None = False
    producer: ApiProducerDTO | None = None
    dates: list[ApiEventDateDTO] | None = None


def _current_lot(dates: list[ApiEventDateDTO]) -> Lot:
    for d in dates:
        active_lot = next((lot for lot in (d.lots or []) if lot.active), None)
        if not active_lot or not active_lot.ticket_types:
            continue

        # one card per ticket type name, each API ticket type is an audience variant
        by_name: dict[str, TicketType] = {}
        for tt in active_lot.ticket_types:
            variant = TicketTypeVariant(
                id=tt.id,
                audience=tt.audience,
                price=tt.price,
                available=tt.max_quantity - tt.sold_quantity,
                total=tt.max_quantity,
            )
            card = by_name.get(tt.name)
            if card is None:
                by_name[tt.name] = TicketType(name=tt.name, description=tt.description or "", variants=[variant])
            else:
                by_name[tt.name] = card.model_copy(update={"variants": [*card.variants, variant]})

        return Lot(
            id=active_lot.id,
            name=active_lot.name,
            status=LotStatus.SOLD_OUT if active_lot.available_quantity <= 0 else LotStatus.ACTIVE,
            tickets=list(by_name.values()),
        )
    return NO_LOT


def map_api_event(api: ApiEventDTO | dict) -> Event:
    if isinstance(api, dict):
        api = ApiEventDTO.model_validate(api)

    api_dates = api.dates or []
    producer = None
    if api.producer:
        producer = EventProducer(
            id=api.producer.id,
            name=api.producer.user.name if api.producer.user else "Produtor",
            photo_url=api.producer.user.photo_url if api.producer.user else None,
        )

    return Event(
        id=api.id,
        name=api.title,
        description=api.description or "",
        category=api.category or "",
        cover_image=api.cover_image or "",
        location=api.location or "",
        address=api.address or "",
        status=api.status,
        dates=[EventDate(id=d.id, date=d.date, time=d.start_time or "", end_time=d.end_time) for d in api_dates],
        current_lot=_current_lot(api_dates),
        featured=bool(api.featured),
        producer=producer,
    )


class EventsQueryDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    category: str | None = None

    _strip_category = field_validator("category", mode="before")(strip_text)

    @property
    def category_filter(self) -> str | None:
        if not self.category or self.category == "all":
            return None
        return self.category


class SuggestionsQueryDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    q: str = Field(default="", max_length=100)


class EventReadDTO(BaseModel):
    event: Event
    sale_status: EventSaleStatus
    badge: str | None
    is_active: bool
    is_new: bool
    lowest_price: float


class HomeSectionsReadDTO(BaseModel):
    featured: list[EventReadDTO]
    trending: list[EventReadDTO]
    upcoming: list[EventReadDTO]
    recent: list[EventReadDTO]
    all: list[EventReadDTO]
