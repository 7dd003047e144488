import logging
from http import HTTPStatus
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.domain.exceptions import (AppError, NotFound, Conflict, Unprocessable, Unauthorized, InvalidInput, Forbidden,
                                   UpstreamError, GraphQLRequestError, ServiceUnavailable)
from app.core.ctx import REQUEST_ID_CTX

logger = logging.getLogger("app.errors")

MEDIA_TYPE = "application/problem+json"
RETRY_AFTER_SECONDS = "5"

_STATUS_BY_CLASS: dict[type[AppError], HTTPStatus] = {
    NotFound: HTTPStatus.NOT_FOUND,
    Unauthorized: HTTPStatus.UNAUTHORIZED,
    Forbidden: HTTPStatus.FORBIDDEN,
    Conflict: HTTPStatus.CONFLICT,
    InvalidInput: HTTPStatus.BAD_REQUEST,
    Unprocessable: HTTPStatus.UNPROCESSABLE_ENTITY,
    UpstreamError: HTTPStatus.BAD_GATEWAY,
    ServiceUnavailable: HTTPStatus.SERVICE_UNAVAILABLE,
}


def _status_for(exc: AppError) -> HTTPStatus:
    for cls in type(exc).mro():
        if cls in _STATUS_BY_CLASS:
            return _STATUS_BY_CLASS[cls]
    return HTTPStatus.BAD_REQUEST


def _bearer_challenge(description: str | None) -> str:
    attributes = ['realm="storefront"', 'error="invalid_token"']
    if description:
        attributes.append(f'error_description="{description}"')
    return "Bearer " + ", ".join(attributes)


def _headers_for(exc: AppError, detail: str | None) -> dict[str, str]:
    if isinstance(exc, Unauthorized):
        return {"WWW-Authenticate": _bearer_challenge(detail)}
    if isinstance(exc, ServiceUnavailable):
        return {"Retry-After": RETRY_AFTER_SECONDS}
    return {}


def _problem(request: Request, exc: AppError) -> JSONResponse:
    http_status = _status_for(exc)
    detail = str(exc) or None

    body = {
        "status": int(http_status),
        "title": http_status.phrase,
        "detail": detail,
        "instance": request.url.path,
    }
    req_id = REQUEST_ID_CTX.get()
    if req_id:
        body["trace_id"] = req_id
    if exc.ctx:
        body["context"] = exc.ctx
    if isinstance(exc, GraphQLRequestError) and exc.codes:
        body["codes"] = exc.codes

    return JSONResponse(status_code=int(http_status), content=body, media_type=MEDIA_TYPE,
                        headers=_headers_for(exc, detail))


def register_error_handler(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        if isinstance(exc, (UpstreamError, ServiceUnavailable)):
            logger.warning("%s %s failed upstream: %s ctx=%s", request.method, request.url.path, exc, exc.ctx)
        return _problem(request, exc)
