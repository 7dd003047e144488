import logging
from app.core.auditing import AuditSpan
from app.core.graphql import GraphQLClient
from app.domain.checkout import crud
from app.domain.checkout.models import build_selection
from app.domain.checkout.schemas import CheckoutItemReadDTO, CheckoutPreviewReadDTO, TicketSelectionDTO
from app.domain.exceptions import Conflict, GraphQLRequestError, InvalidInput
from app.services import event_service

logger = logging.getLogger("app.checkout")

CHECKOUT_START_FAILED = "Não foi possível iniciar o checkout."


async def preview(gql: GraphQLClient, token: str, schema: TicketSelectionDTO) -> CheckoutPreviewReadDTO:
    if schema.quantity < 1:
        raise InvalidInput("Quantidade deve ser no mínimo 1", ctx={"quantity": schema.quantity})

    event = await event_service.get_event(gql, schema.event_id)
    selection = build_selection(event, schema.date_id, schema.variant_id, schema.quantity)
    if selection.quantity != schema.quantity:
        logger.info("Ticket quantity clamped variant=%s requested=%d granted=%d",
                    selection.variant.id, schema.quantity, selection.quantity)

    items = [{
        "eventDateId": selection.date.id,
        "ticketTypeId": selection.variant.id,
        "quantity": selection.quantity,
    }]
    async with AuditSpan(scope="CHECKOUT", action="PREVIEW", object_type="checkout", event_id=event.id,
                         meta={"variant_id": selection.variant.id, "quantity": selection.quantity}) as span:
        try:
            result = await crud.checkout_preview(gql, token, items)
        except GraphQLRequestError as e:
            raise Conflict(CHECKOUT_START_FAILED, ctx={"event_id": event.id}) from e

        checkout_id = (result or {}).get("checkoutId")
        if not checkout_id:
            raise Conflict(CHECKOUT_START_FAILED, ctx={"event_id": event.id})
        span.checkout_id = checkout_id

    return CheckoutPreviewReadDTO(
        checkout_id=checkout_id,
        total=float(result.get("total") or selection.subtotal),
        quantity=selection.quantity,
        requested_quantity=schema.quantity,
        items=[CheckoutItemReadDTO.model_validate(item) for item in result.get("items") or []],
    )
