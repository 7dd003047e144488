import logging
from app.core.auditing import AuditSpan
from app.domain.exceptions import InvalidInput, Unauthorized, UpstreamError
from app.domain.payments.gateways import PagarmeGateway, PaymentGateway, StripeGateway
from app.domain.payments.schemas import (OnboardingLinkDTO, PagarmeRecipientCreateDTO, PaymentAccountStatusDTO,
                                         PixKeyUpdateDTO)

logger = logging.getLogger("app.payment_accounts")


def _require(gateway: PaymentGateway, kind: type[PaymentGateway]):
    if not isinstance(gateway, kind):
        raise InvalidInput("Operation not supported by the configured payment provider",
                           ctx={"provider": gateway.provider.value})
    return gateway


async def get_status(gateway: PaymentGateway, token: str) -> PaymentAccountStatusDTO:
    try:
        return await gateway.account_status(token)
    except (UpstreamError, Unauthorized) as e:
        logger.info("Payment account status unavailable provider=%s err=%s", gateway.provider.value, e)
        return PaymentAccountStatusDTO(provider=gateway.provider, enabled=False)


async def create_pagarme_recipient(gateway: PaymentGateway, token: str,
                                   schema: PagarmeRecipientCreateDTO) -> PaymentAccountStatusDTO:
    pagarme = _require(gateway, PagarmeGateway)
    async with AuditSpan(scope="PAYMENTS", action="CREATE_RECIPIENT", object_type="recipient",
                         meta={"document_type": schema.document_type}) as span:
        data = await pagarme.create_recipient(token, schema)
        span.object_id = data.get("recipientId")
    return await get_status(gateway, token)


async def create_stripe_account(gateway: PaymentGateway, token: str) -> OnboardingLinkDTO:
    stripe = _require(gateway, StripeGateway)
    async with AuditSpan(scope="PAYMENTS", action="CREATE_CONNECT_ACCOUNT", object_type="connect_account") as span:
        created = await stripe.create_account(token)
        span.object_id = created.get("accountId")
        link = await stripe.create_onboarding_link(token)
    return OnboardingLinkDTO(url=_link_url(link))


async def create_stripe_onboarding_link(gateway: PaymentGateway, token: str) -> OnboardingLinkDTO:
    stripe = _require(gateway, StripeGateway)
    return OnboardingLinkDTO(url=_link_url(await stripe.create_onboarding_link(token)))


async def update_pix_key(gateway: PaymentGateway, token: str, schema: PixKeyUpdateDTO) -> PaymentAccountStatusDTO:
    stripe = _require(gateway, StripeGateway)
    async with AuditSpan(scope="PAYMENTS", action="UPDATE_PIX_KEY", object_type="connect_account",
                         meta={"pix_key_type": schema.pix_key_type}):
        await stripe.update_pix_key(token, schema)
    return await get_status(gateway, token)


def _link_url(data: dict) -> str:
    url = data.get("url")
    if not url:
        raise UpstreamError("Onboarding link missing from payment response")
    return url
