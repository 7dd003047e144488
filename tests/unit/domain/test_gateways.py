import json
import httpx
import pytest
from datetime import datetime, timezone
from app.core.rest import RestClient
from app.domain.exceptions import UpstreamError, Unauthorized
from app.domain.payments.gateways import PagarmeGateway, StripeGateway, create_gateway
from app.domain.payments.models import PaymentProvider
from app.domain.payments.schemas import PagarmeRecipientCreateDTO


def _rest(handler) -> tuple[RestClient, httpx.AsyncClient]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RestClient(http, "https://pay.test/v1"), http


@pytest.mark.asyncio
async def test_pagarme_create_pix_payment_maps_fields():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "pagarmeOrderId": "or_1", "pixQrCode": "000201PIX", "pixQrCodeUrl": "https://qr/1.png",
            "expiresAt": "2025-01-01T12:30:00Z", "status": "pending",
        })

    rest, http = _rest(handler)
    async with http:
        payment = await PagarmeGateway(rest).create_pix_payment("tok", "chk-1")

    assert seen == {"url": "https://pay.test/v1/payment/create", "auth": "Bearer tok", "body": {"orderId": "chk-1"}}
    assert payment.provider == PaymentProvider.PAGARME
    assert payment.copy_paste == "000201PIX"
    assert payment.qr_code_url == "https://qr/1.png"
    assert payment.expires_at == datetime(2025, 1, 1, 12, 30, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_stripe_create_pix_payment_reads_unix_expiry():
    def handler(request: httpx.Request):
        return httpx.Response(200, json={"paymentIntentId": "pi_1", "pixCopyPaste": "000201STRIPE",
                                         "pixQrCode": "https://qr/2.png", "expiresAt": 1735734600})

    rest, http = _rest(handler)
    async with http:
        payment = await StripeGateway(rest).create_pix_payment("tok", "chk-1")

    assert payment.copy_paste == "000201STRIPE"
    assert payment.qr_code_url == "https://qr/2.png"
    assert payment.expires_at == datetime(2025, 1, 1, 12, 30, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_missing_pix_code_raises_upstream_error():
    rest, http = _rest(lambda request: httpx.Response(200, json={"status": "pending"}))
    async with http:
        with pytest.raises(UpstreamError):
            await PagarmeGateway(rest).create_pix_payment("tok", "chk-1")


@pytest.mark.asyncio
async def test_get_payment_status_passes_order_id_as_query_param():
    seen = {}

    def handler(request: httpx.Request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"paid": True, "status": "paid", "orderStatus": "PAID"})

    rest, http = _rest(handler)
    async with http:
        status = await PagarmeGateway(rest).get_payment_status("tok", "chk 1&x")

    assert seen["params"] == {"orderId": "chk 1&x"}
    assert status.paid is True
    assert status.order_status == "PAID"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "code, body, exception, message",
    [
        (401, {"error": "token inválido"}, Unauthorized, "token inválido"),
        (500, {"error": "boom"}, UpstreamError, "boom"),
        (502, None, UpstreamError, "Erro na requisição"),
    ]
)
async def test_rest_errors_map_to_app_errors(code, body, exception, message):
    def handler(request: httpx.Request):
        if body is None:
            return httpx.Response(code, text="<html>bad gateway</html>")
        return httpx.Response(code, json=body)

    rest, http = _rest(handler)
    async with http:
        with pytest.raises(exception) as e:
            await PagarmeGateway(rest).get_payment_status("tok", "chk-1")
    assert str(e.value) == message


@pytest.mark.asyncio
async def test_transport_failure_raises_upstream_error():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("refused", request=request)

    rest, http = _rest(handler)
    async with http:
        with pytest.raises(UpstreamError, match="unreachable"):
            await StripeGateway(rest).get_payment_status("tok", "chk-1")


@pytest.mark.asyncio
async def test_pagarme_recipient_payload_uses_camel_case():
    seen = {}

    def handler(request: httpx.Request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"recipientId": "re_1"})

    schema = PagarmeRecipientCreateDTO(
        document="123.456.789-09", documentType="CPF", type="individual", bankCode="341", branchNumber="1234",
        accountNumber="12345", accountCheckDigit="6", accountType="checking",
    )
    rest, http = _rest(handler)
    async with http:
        await PagarmeGateway(rest).create_recipient("tok", schema)

    assert seen["body"]["document"] == "12345678909"
    assert seen["body"]["bankCode"] == "341"
    assert seen["body"]["accountCheckDigit"] == "6"


@pytest.mark.asyncio
async def test_stripe_account_status():
    def handler(request: httpx.Request):
        assert request.url.path == "/v1/connect/status"
        return httpx.Response(200, json={"hasAccount": True, "accountId": "acct_1", "onboardingComplete": True,
                                         "payoutsEnabled": False, "transfersActive": True})

    rest, http = _rest(handler)
    async with http:
        status = await StripeGateway(rest).account_status("tok")

    assert status.enabled is True
    assert status.has_account is True
    assert status.status == "active"
    assert status.payouts_enabled is False


def test_create_gateway():
    rest = RestClient(httpx.AsyncClient(), "https://pay.test")
    assert isinstance(create_gateway("stripe", rest), StripeGateway)
    assert isinstance(create_gateway("pagarme", rest), PagarmeGateway)
    with pytest.raises(ValueError):
        create_gateway("paypal", rest)
