from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict


class PixCheckoutState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PIX = "pix"
    SUCCESS = "success"
    ERROR = "error"


class PaymentProvider(str, Enum):
    PAGARME = "pagarme"
    STRIPE = "stripe"


class PixPayment(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: PaymentProvider
    payment_id: str
    copy_paste: str
    qr_code_url: str | None = None
    expires_at: datetime | None = None
    status: str = "pending"


class PaymentStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    paid: bool
    status: str = ""
    order_status: str | None = None
