from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class LotStatus(str, Enum):
    ACTIVE = "active"
    SOLD_OUT = "sold_out"
    ENDED = "ended"


class EventSaleStatus(str, Enum):
    ESGOTADO = "esgotado"
    ULTIMOS = "ultimos"
    ESGOTANDO = "esgotando"
    NOVO = "novo"
    ATIVO = "ativo"


class Audience(str, Enum):
    GENERAL = "GENERAL"
    MALE = "MALE"
    FEMALE = "FEMALE"
    CHILD = "CHILD"


AUDIENCE_LABELS = {
    Audience.GENERAL.value: "Geral",
    Audience.MALE.value: "Masculino",
    Audience.FEMALE.value: "Feminino",
    Audience.CHILD.value: "Criança",
}


class EventDate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    date: str
    time: str = ""
    end_time: str | None = None


class TicketTypeVariant(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    audience: str
    price: float
    available: int
    total: int

    @property
    def audience_label(self) -> str:
        return AUDIENCE_LABELS.get(self.audience, "Geral")


class TicketType(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    variants: list[TicketTypeVariant] = Field(default_factory=list)


class Lot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    status: LotStatus
    tickets: list[TicketType] = Field(default_factory=list)

    def variants(self):
        for ticket in self.tickets:
            yield from ticket.variants


NO_LOT = Lot(id="", name="Nenhum lote", status=LotStatus.ENDED, tickets=[])


class EventProducer(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    photo_url: str | None = None


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    category: str = ""
    cover_image: str = ""
    location: str = ""
    address: str = ""
    status: str | None = None
    dates: list[EventDate] = Field(default_factory=list)
    current_lot: Lot = NO_LOT
    featured: bool = False
    producer: EventProducer | None = None

    def find_date(self, date_id: str) -> EventDate | None:
        return next((d for d in self.dates if d.id == date_id), None)

    def find_variant(self, variant_id: str) -> tuple[TicketType, TicketTypeVariant] | None:
        for ticket in self.current_lot.tickets:
            for variant in ticket.variants:
                if variant.id == variant_id:
                    return ticket, variant
        return None


CATEGORIES = (
    {"id": "all", "name": "Todos", "icon": "🎉"},
    {"id": "shows", "name": "Shows", "icon": "🎤"},
    {"id": "festas", "name": "Festas", "icon": "🎊"},
    {"id": "esportes", "name": "Esportes", "icon": "⚽"},
    {"id": "teatro", "name": "Teatro", "icon": "🎭"},
    {"id": "festivais", "name": "Festivais", "icon": "🎪"},
)
