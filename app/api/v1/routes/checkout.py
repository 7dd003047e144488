from typing import Annotated
from fastapi import APIRouter, Depends, Response, status
from app.core.dependencies.auth import auth_dependency, get_session_store
from app.core.dependencies.clients import gql_dependency, pix_registry_dependency
from app.domain.checkout.schemas import CheckoutPreviewReadDTO, TicketSelectionDTO
from app.domain.exceptions import NotFound
from app.domain.payments.schemas import PixSessionCreateDTO, PixSessionReadDTO
from app.services import checkout_service
from app.services.pix_checkout_service import qr_png
from app.services.session_service import SessionStore

router = APIRouter(prefix="/checkout", tags=["checkout"])
sessions_dependency = Annotated[SessionStore, Depends(get_session_store)]


@router.post(
    "/preview",
    status_code=status.HTTP_201_CREATED,
    response_model=CheckoutPreviewReadDTO
)
async def create_preview(schema: TicketSelectionDTO, gql: gql_dependency, auth: auth_dependency):
    return await checkout_service.preview(gql, auth.token, schema)


@router.post(
    "/pix-sessions",
    status_code=status.HTTP_201_CREATED,
    response_model=PixSessionReadDTO
)
async def open_pix_session(schema: PixSessionCreateDTO, auth: auth_dependency, registry: pix_registry_dependency,
                           sessions: sessions_dependency, response: Response):
    async def refresh_wallet():
        await sessions.refresh_tickets(auth.token)

    session = await registry.start(schema.checkout_id, auth.token, auth.user.id, on_paid=refresh_wallet)
    response.headers["Location"] = f"/checkout/pix-sessions/{session.id}"
    return session.to_read_dto()


@router.get(
    "/pix-sessions/{session_id}",
    status_code=status.HTTP_200_OK,
    response_model=PixSessionReadDTO
)
async def get_pix_session(session_id: str, auth: auth_dependency, registry: pix_registry_dependency):
    return registry.get(session_id, auth.user.id).to_read_dto()


@router.post(
    "/pix-sessions/{session_id}/retry",
    status_code=status.HTTP_200_OK,
    response_model=PixSessionReadDTO
)
async def retry_pix_session(session_id: str, auth: auth_dependency, registry: pix_registry_dependency):
    session = registry.get(session_id, auth.user.id)
    await session.pay()
    return session.to_read_dto()


@router.get(
    "/pix-sessions/{session_id}/qr.png",
    status_code=status.HTTP_200_OK,
    response_class=Response
)
async def get_pix_qr(session_id: str, auth: auth_dependency, registry: pix_registry_dependency):
    session = registry.get(session_id, auth.user.id)
    if session.payment is None:
        raise NotFound("PIX code not available", ctx={"session_id": session_id, "state": session.state})
    return Response(content=await qr_png(session.payment.copy_paste), media_type="image/png")


@router.delete(
    "/pix-sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT
)
async def close_pix_session(session_id: str, auth: auth_dependency, registry: pix_registry_dependency):
    registry.close(session_id, auth.user.id)
