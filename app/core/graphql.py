import asyncio
import logging
from typing import Any
import httpx
from app.core.config import GRAPHQL_URL, GRAPHQL_QUERY_ATTEMPTS
from app.domain.exceptions import UpstreamError, GraphQLRequestError, Unauthorized

logger = logging.getLogger("app.graphql")

UNAUTHENTICATED_CODES = {"UNAUTHENTICATED", "UNAUTHORIZED"}


def _error_codes(errors: list[dict]) -> list[str]:
    codes = []
    for err in errors:
        code = (err.get("extensions") or {}).get("code")
        if code:
            codes.append(str(code))
    return codes


class GraphQLClient:
    """Thin GraphQL-over-HTTP client for the remote ticketing API.

    Queries are read-only and retried on transport errors with exponential
    backoff. Mutations are sent exactly once.
    """

    def __init__(
            self,
            http: httpx.AsyncClient,
            endpoint: str = GRAPHQL_URL,
            *,
            attempts: int = GRAPHQL_QUERY_ATTEMPTS,
            backoff_seconds: float = 0.5,
    ) -> None:
        self._http = http
        self._endpoint = endpoint
        self._attempts = max(1, attempts)
        self._backoff = backoff_seconds

    async def query(self, document: str, variables: dict[str, Any] | None = None, *,
                    token: str | None = None) -> dict[str, Any]:
        return await self._send(document, variables, token=token, attempts=self._attempts)

    async def mutate(self, document: str, variables: dict[str, Any] | None = None, *,
                     token: str | None = None) -> dict[str, Any]:
        return await self._send(document, variables, token=token, attempts=1)

    async def _send(self, document: str, variables: dict[str, Any] | None, *, token: str | None,
                    attempts: int) -> dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        body = {"query": document, "variables": variables or {}}

        delay = self._backoff
        for attempt in range(1, attempts + 1):
            try:
                response = await self._http.post(self._endpoint, json=body, headers=headers)
                break
            except httpx.HTTPError as exc:
                logger.warning("GraphQL transport error attempt=%d/%d err=%s", attempt, attempts, exc)
                if attempt == attempts:
                    raise UpstreamError("GraphQL API unreachable", ctx={"reason": type(exc).__name__}) from exc
                await asyncio.sleep(delay)
                delay *= 2

        payload = self._decode(response)
        errors = payload.get("errors") or []
        if errors:
            messages = [str(e.get("message", "")) for e in errors]
            codes = _error_codes(errors)
            if UNAUTHENTICATED_CODES.intersection(codes):
                raise Unauthorized("Invalid authentication credentials", ctx={"reason": "upstream_rejected"})
            raise GraphQLRequestError(messages, codes=codes)

        if response.status_code >= 400:
            if response.status_code == httpx.codes.UNAUTHORIZED:
                raise Unauthorized("Invalid authentication credentials", ctx={"reason": "upstream_rejected"})
            raise UpstreamError("GraphQL API error", status_code=response.status_code)

        return payload.get("data") or {}

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError("Invalid GraphQL response", status_code=response.status_code) from exc
        if not isinstance(payload, dict):
            raise UpstreamError("Invalid GraphQL response", status_code=response.status_code)
        return payload
