from datetime import date, datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from app.core.utils.text_utils import strip_text
from app.domain.events.models import Audience
from app.domain.events.schemas import EventReadDTO

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ProducerEventStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    PAUSED = "PAUSED"


class _ApiInput(BaseModel):
    model_config = ConfigDict(extra='forbid', alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)


class EventCreateDTO(_ApiInput):
    title: str = Field(min_length=3, max_length=120)
    description: str = Field(min_length=10, max_length=5000)
    category: str = Field(min_length=1, max_length=50)
    cover_image: str = Field(min_length=1)
    location: str = Field(min_length=2, max_length=200)
    address: str | None = Field(default=None, max_length=300)

    _strip_text = field_validator("title", "description", "category", "location", "address", mode="before")(strip_text)

    def to_api(self) -> dict:
        payload = self.model_dump(by_alias=True, mode="json")
        payload["address"] = self.address or None
        return payload


class EventUpdateDTO(_ApiInput):
    title: str | None = Field(default=None, min_length=3, max_length=120)
    description: str | None = Field(default=None, min_length=10, max_length=5000)
    category: str | None = Field(default=None, min_length=1, max_length=50)
    cover_image: str | None = None
    location: str | None = Field(default=None, min_length=2, max_length=200)
    address: str | None = Field(default=None, max_length=300)

    _strip_text = field_validator("title", "description", "category", "location", "address", mode="before")(strip_text)


class EventStatusUpdateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    status: ProducerEventStatus


class EventDateCreateDTO(_ApiInput):
    date: date
    start_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=TIME_PATTERN)


class LotCreateDTO(_ApiInput):
    name: str = Field(min_length=1, max_length=80)
    starts_at: datetime
    ends_at: datetime
    total_quantity: int = Field(gt=0)

    _strip_name = field_validator("name", mode="before")(strip_text)

    @model_validator(mode="after")
    def _check_window(self):
        if self.ends_at <= self.starts_at:
            raise ValueError("ends_at must be after starts_at")
        return self


class TicketTypeCreateDTO(_ApiInput):
    name: str = Field(min_length=1, max_length=80)
    description: str | None = Field(default=None, max_length=500)
    price: float = Field(ge=0)
    audience: Audience = Audience.GENERAL
    max_quantity: int = Field(gt=0)

    _strip_text = field_validator("name", "description", mode="before")(strip_text)


class CreatedResourceDTO(BaseModel):
    id: str


class EventStatusReadDTO(BaseModel):
    id: str
    status: str


class ProducerProfileReadDTO(BaseModel):
    id: str
    name: str
    photo_url: str | None = None
    company_name: str | None = None
    events: list[EventReadDTO]


class ScanCountReadDTO(BaseModel):
    event_id: str
    count: int
