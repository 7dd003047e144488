from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any
from app.core.rest import RestClient
from app.domain.exceptions import UpstreamError
from app.domain.payments.models import PaymentProvider, PaymentStatus, PixPayment
from app.domain.payments.schemas import (PagarmeRecipientCreateDTO, PaymentAccountStatusDTO, PixKeyUpdateDTO)


def _parse_iso(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _parse_unix(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


def _status_from(data: dict[str, Any]) -> PaymentStatus:
    return PaymentStatus(
        paid=bool(data.get("paid")),
        status=str(data.get("status") or ""),
        order_status=data.get("orderStatus"),
    )


class PaymentGateway(ABC):
    provider: PaymentProvider

    def __init__(self, rest: RestClient) -> None:
        self._rest = rest

    @abstractmethod
    def _pix_from(self, data: dict[str, Any]) -> PixPayment:
        ...

    @abstractmethod
    async def account_status(self, token: str) -> PaymentAccountStatusDTO:
        ...

    async def create_pix_payment(self, token: str, checkout_id: str) -> PixPayment:
        data = await self._rest.post("/payment/create", token=token, json={"orderId": checkout_id})
        return self._pix_from(data)

    async def get_payment_status(self, token: str, checkout_id: str) -> PaymentStatus:
        data = await self._rest.get("/payment/status", token=token, params={"orderId": checkout_id})
        return _status_from(data)


class PagarmeGateway(PaymentGateway):
    provider = PaymentProvider.PAGARME

    def _pix_from(self, data: dict[str, Any]) -> PixPayment:
        code = data.get("pixQrCode")
        if not code:
            raise UpstreamError("PIX code missing from payment response", ctx={"provider": self.provider})
        return PixPayment(
            provider=self.provider,
            payment_id=str(data.get("pagarmeOrderId") or data.get("pagarmeChargeId") or ""),
            copy_paste=code,
            qr_code_url=data.get("pixQrCodeUrl") or None,
            expires_at=_parse_iso(data.get("expiresAt")),
            status=str(data.get("status") or "pending"),
        )

    async def create_recipient(self, token: str, schema: PagarmeRecipientCreateDTO) -> dict[str, Any]:
        return await self._rest.post("/recipient/create", token=token, json=schema.model_dump(by_alias=True))

    async def get_recipient_status(self, token: str) -> dict[str, Any]:
        return await self._rest.get("/recipient/status", token=token)

    async def account_status(self, token: str) -> PaymentAccountStatusDTO:
        data = await self.get_recipient_status(token)
        return PaymentAccountStatusDTO(
            provider=self.provider,
            enabled=True,
            has_account=bool(data.get("hasRecipient")),
            account_id=data.get("recipientId"),
            onboarding_complete=bool(data.get("onboardingComplete")),
            status=data.get("status"),
        )


class StripeGateway(PaymentGateway):
    provider = PaymentProvider.STRIPE

    def _pix_from(self, data: dict[str, Any]) -> PixPayment:
        code = data.get("pixCopyPaste")
        if not code:
            raise UpstreamError("PIX code missing from payment response", ctx={"provider": self.provider})
        return PixPayment(
            provider=self.provider,
            payment_id=str(data.get("paymentIntentId") or ""),
            copy_paste=code,
            qr_code_url=data.get("pixQrCode") or None,
            expires_at=_parse_unix(data.get("expiresAt")),
            status=str(data.get("status") or "requires_action"),
        )

    async def create_account(self, token: str) -> dict[str, Any]:
        return await self._rest.post("/connect/create-account", token=token)

    async def create_onboarding_link(self, token: str) -> dict[str, Any]:
        return await self._rest.post("/connect/onboarding-link", token=token)

    async def get_account_status(self, token: str) -> dict[str, Any]:
        return await self._rest.get("/connect/status", token=token)

    async def update_pix_key(self, token: str, schema: PixKeyUpdateDTO) -> dict[str, Any]:
        return await self._rest.post("/connect/pix-key", token=token, json=schema.model_dump(by_alias=True))

    async def account_status(self, token: str) -> PaymentAccountStatusDTO:
        data = await self.get_account_status(token)
        return PaymentAccountStatusDTO(
            provider=self.provider,
            enabled=True,
            has_account=bool(data.get("hasAccount")),
            account_id=data.get("accountId"),
            onboarding_complete=bool(data.get("onboardingComplete")),
            status="active" if data.get("transfersActive") else None,
            payouts_enabled=data.get("payoutsEnabled"),
        )


def create_gateway(provider: str, rest: RestClient) -> PaymentGateway:
    if provider == PaymentProvider.STRIPE.value:
        return StripeGateway(rest)
    if provider == PaymentProvider.PAGARME.value:
        return PagarmeGateway(rest)
    raise ValueError(f"Unsupported payment provider: {provider}")
