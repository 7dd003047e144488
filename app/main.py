import logging
import httpx
from fastapi import FastAPI
from app.api.exceptions import register_error_handler
from app.api.v1.routes import auth, checkout, events, health, payments, producers, tickets, users
from app.core.config import HTTP_MAX_CONNECTIONS, HTTP_TIMEOUT_SECONDS, PAYMENT_PROVIDER
from app.core.graphql import GraphQLClient
from app.core.log import configure_logging
from app.core.middleware.http_ctx import HttpContextMiddleware
from app.core.middleware.request_id import RequestIdMiddleware
from app.core.redis import create_redis
from app.core.rest import RestClient
from app.domain.payments.gateways import create_gateway
from app.services.pix_checkout_service import PixCheckoutRegistry
from app.services.session_service import SessionStore

logger = logging.getLogger("app")


async def lifespan(app: FastAPI):
    configure_logging()
    r = await create_redis()
    http = httpx.AsyncClient(
        timeout=httpx.Timeout(HTTP_TIMEOUT_SECONDS),
        limits=httpx.Limits(max_connections=HTTP_MAX_CONNECTIONS),
    )
    gql = GraphQLClient(http)
    gateway = create_gateway(PAYMENT_PROVIDER, RestClient(http))

    app.state.redis = r
    app.state.graphql = gql
    app.state.gateway = gateway
    app.state.sessions = SessionStore(gql, r)
    app.state.pix_sessions = PixCheckoutRegistry(gateway)
    logger.info("Storefront started provider=%s", PAYMENT_PROVIDER)
    try:
        yield
    finally:
        app.state.pix_sessions.close_all()
        await http.aclose()
        await r.aclose()


app = FastAPI(lifespan=lifespan)
app.add_middleware(HttpContextMiddleware)
app.add_middleware(RequestIdMiddleware, header_name="X-Request-ID")
register_error_handler(app)
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(tickets.router)
app.include_router(events.router)
app.include_router(checkout.router)
app.include_router(producers.router)
app.include_router(payments.router)
