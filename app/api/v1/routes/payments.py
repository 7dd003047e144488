from fastapi import APIRouter, status
from app.core.dependencies.auth import producer_dependency
from app.core.dependencies.clients import gateway_dependency
from app.domain.payments.schemas import (OnboardingLinkDTO, PagarmeRecipientCreateDTO, PaymentAccountStatusDTO,
                                         PixKeyUpdateDTO)
from app.services import payment_account_service

router = APIRouter(prefix="/producer/payment-account", tags=["payments"])


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=PaymentAccountStatusDTO
)
async def get_payment_account(gateway: gateway_dependency, auth: producer_dependency):
    return await payment_account_service.get_status(gateway, auth.token)


@router.post(
    "/recipient",
    status_code=status.HTTP_201_CREATED,
    response_model=PaymentAccountStatusDTO
)
async def create_recipient(schema: PagarmeRecipientCreateDTO, gateway: gateway_dependency, auth: producer_dependency):
    return await payment_account_service.create_pagarme_recipient(gateway, auth.token, schema)


@router.post(
    "/connect",
    status_code=status.HTTP_201_CREATED,
    response_model=OnboardingLinkDTO
)
async def create_connect_account(gateway: gateway_dependency, auth: producer_dependency):
    return await payment_account_service.create_stripe_account(gateway, auth.token)


@router.post(
    "/connect/onboarding-link",
    status_code=status.HTTP_200_OK,
    response_model=OnboardingLinkDTO
)
async def create_onboarding_link(gateway: gateway_dependency, auth: producer_dependency):
    return await payment_account_service.create_stripe_onboarding_link(gateway, auth.token)


@router.put(
    "/pix-key",
    status_code=status.HTTP_200_OK,
    response_model=PaymentAccountStatusDTO
)
async def update_pix_key(schema: PixKeyUpdateDTO, gateway: gateway_dependency, auth: producer_dependency):
    return await payment_account_service.update_pix_key(gateway, auth.token, schema)
