from typing import Annotated
import redis.asyncio as redis
from fastapi import Depends, Request
from app.core.graphql import GraphQLClient
from app.domain.payments.gateways import PaymentGateway
from app.services.pix_checkout_service import PixCheckoutRegistry


def get_graphql(request: Request) -> GraphQLClient:
    return request.app.state.graphql


def get_redis_client(request: Request) -> redis.Redis:
    return request.app.state.redis


def get_gateway(request: Request) -> PaymentGateway:
    return request.app.state.gateway


def get_pix_registry(request: Request) -> PixCheckoutRegistry:
    return request.app.state.pix_sessions


gql_dependency = Annotated[GraphQLClient, Depends(get_graphql)]
redis_dependency = Annotated[redis.Redis, Depends(get_redis_client)]
gateway_dependency = Annotated[PaymentGateway, Depends(get_gateway)]
pix_registry_dependency = Annotated[PixCheckoutRegistry, Depends(get_pix_registry)]
