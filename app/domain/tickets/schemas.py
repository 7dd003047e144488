from pydantic import BaseModel, ConfigDict, Field, field_validator
from app.core.utils.text_utils import strip_text
from app.domain.tickets.models import Ticket


class TicketsQueryDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    q: str | None = Field(default=None, max_length=200)


class TicketReadDTO(BaseModel):
    ticket: Ticket
    status: str


class TicketListDTO(BaseModel):
    items: list[TicketReadDTO]
    total: int
    is_filtering: bool


class TicketValidateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    qr_code: str = Field(min_length=1, max_length=2048)

    _strip_code = field_validator("qr_code", mode="before")(strip_text)


class TicketValidationResultDTO(BaseModel):
    success: bool
    error_code: str | None = None
    message: str
    holder_name: str | None = None
    ticket_type: str | None = None
    scan_count: int
