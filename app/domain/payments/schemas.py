from datetime import datetime
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from app.core.utils.text_utils import strip_text, only_digits
from app.domain.payments.models import PaymentProvider, PixCheckoutState


class PagarmeRecipientCreateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid', alias_generator=to_camel, populate_by_name=True)

    document: str
    document_type: Literal["CPF", "CNPJ"]
    type: Literal["individual", "company"]
    bank_code: str = Field(min_length=3, max_length=3)
    branch_number: str = Field(min_length=1, max_length=5)
    branch_check_digit: str = Field(default="", max_length=1)
    account_number: str = Field(min_length=1, max_length=13)
    account_check_digit: str = Field(min_length=1, max_length=2)
    account_type: Literal["checking", "savings"]

    @field_validator("document", mode="before")
    def _document_digits(cls, v):
        return only_digits(v) if isinstance(v, str) else v

    @field_validator("document")
    def _document_length(cls, v: str):
        if len(v) not in (11, 14):
            raise ValueError("Documento deve ter 11 (CPF) ou 14 (CNPJ) dígitos")
        return v


class PixKeyUpdateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid', alias_generator=to_camel, populate_by_name=True)

    pix_key: str = Field(min_length=1, max_length=140)
    pix_key_type: Literal["cpf", "cnpj", "email", "phone", "random"]

    _strip_key = field_validator("pix_key", mode="before")(strip_text)


class PaymentAccountStatusDTO(BaseModel):
    provider: PaymentProvider
    enabled: bool
    has_account: bool = False
    account_id: str | None = None
    onboarding_complete: bool = False
    status: str | None = None
    payouts_enabled: bool | None = None


class OnboardingLinkDTO(BaseModel):
    url: str


class PixSessionCreateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    checkout_id: str | None = None

    _strip_checkout = field_validator("checkout_id", mode="before")(strip_text)


class PixSessionReadDTO(BaseModel):
    id: str
    checkout_id: str | None
    state: PixCheckoutState
    copy_paste: str | None = None
    qr_code_url: str | None = None
    expires_at: datetime | None = None
    time_left: str | None = None
    error: str | None = None
    completed: bool = False
