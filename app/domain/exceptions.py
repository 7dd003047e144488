from app.core.utils.serialization import normalize_ctx


class AppError(Exception):
    def __init__(self, message: str = "", *, ctx: dict | None = None) -> None:
        super().__init__(message or self.__class__.__name__)
        self.ctx = normalize_ctx(ctx or {})


class NotFound(AppError):
    pass
class Unauthorized(AppError):
    pass
class Forbidden(AppError):
    pass
class Conflict(AppError):
    pass
class InvalidInput(AppError):
    pass
class Unprocessable(AppError):
    pass


class UpstreamError(AppError):
    """A remote collaborator (GraphQL API or payment backend) failed."""

    def __init__(self, message: str = "", *, status_code: int | None = None, ctx: dict | None = None) -> None:
        ctx = dict(ctx or {})
        if status_code is not None:
            ctx.setdefault("upstream_status", status_code)
        super().__init__(message, ctx=ctx)
        self.status_code = status_code


class GraphQLRequestError(UpstreamError):
    def __init__(self, messages: list[str], *, codes: list[str] | None = None, ctx: dict | None = None) -> None:
        super().__init__(messages[0] if messages else "GraphQL request failed", ctx=ctx)
        self.messages = messages
        self.codes = codes or []


class ServiceUnavailable(AppError):
    pass
