import logging
from typing import Any
import httpx
from app.core.config import PAYMENTS_API_URL
from app.domain.exceptions import UpstreamError, Unauthorized

logger = logging.getLogger("app.rest")

DEFAULT_ERROR = "Erro na requisição"


class RestClient:
    """JSON client for the payment backend's REST endpoints."""

    def __init__(self, http: httpx.AsyncClient, base_url: str = PAYMENTS_API_URL) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")

    async def request(
            self,
            method: str,
            path: str,
            *,
            token: str | None = None,
            json: dict[str, Any] | None = None,
            params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = f"{self._base_url}{path}"
        try:
            response = await self._http.request(method, url, headers=headers, json=json, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Payment API transport error %s %s err=%s", method, path, exc)
            raise UpstreamError("Payment API unreachable", ctx={"path": path}) from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error:
            message = data.get("error") or DEFAULT_ERROR
            if response.status_code == httpx.codes.UNAUTHORIZED:
                raise Unauthorized(message, ctx={"reason": "upstream_rejected"})
            raise UpstreamError(message, status_code=response.status_code, ctx={"path": path})
        return data

    async def get(self, path: str, **kwargs) -> dict[str, Any]:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> dict[str, Any]:
        return await self.request("POST", path, **kwargs)
