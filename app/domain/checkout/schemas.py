from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from app.core.utils.text_utils import strip_text


class TicketSelectionDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    event_id: str = Field(min_length=1)
    date_id: str = Field(min_length=1)
    variant_id: str = Field(min_length=1)
    quantity: int = 1

    _strip_ids = field_validator("event_id", "date_id", "variant_id", mode="before")(strip_text)


class CheckoutItemReadDTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    event_title: str = ""
    event_date: str = ""
    ticket_type_name: str = ""
    quantity: int = 0
    unit_price: float = 0
    subtotal: float = 0


class CheckoutPreviewReadDTO(BaseModel):
    checkout_id: str
    total: float
    quantity: int
    requested_quantity: int
    items: list[CheckoutItemReadDTO]
