import json
import logging
import time
from datetime import timezone, datetime
from typing import Any, Mapping
from redis.exceptions import RedisError
from app.core.config import AUDIT_STREAM, AUDIT_STREAM_MAXLEN
from app.core.ctx import get_redis, get_request_id, get_route, get_actor_id, get_actor_role, get_client_ip
from app.domain.exceptions import AppError, UpstreamError

logger = logging.getLogger("app.audit")


class AuditStatus:
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"


async def audit_emit(
    *,
    scope: str,
    action: str,
    status: str,
    object_type: str | None = None,
    object_id: str | None = None,
    event_id: str | None = None,
    checkout_id: str | None = None,
    reason: str | None = None,
    meta: Mapping[str, Any] | None = None
) -> str | None:
    r = get_redis()
    if not r:
        return None

    payload = {
        "request_id": get_request_id(),
        "scope": scope,
        "action": action,
        "status": status,
        "actor_user_id": get_actor_id(),
        "actor_role": get_actor_role(),
        "actor_ip": get_client_ip(),
        "route": get_route(),
        "object_type": object_type,
        "object_id": object_id,
        "event_id": event_id,
        "checkout_id": checkout_id,
        "reason": reason,
        "meta": dict(meta or {}),
    }
    try:
        return await r.xadd(AUDIT_STREAM, {"json": json.dumps(payload, default=str)},
                            maxlen=AUDIT_STREAM_MAXLEN, approximate=True)
    except RedisError:
        logger.warning("Audit emit failed scope=%s action=%s", scope, action, exc_info=True)
        return None


def _reason_from_exception(exception: BaseException | None) -> str | None:
    if exception is None:
        return None
    if isinstance(exception, UpstreamError) and exception.status_code is not None:
        return f"{type(exception).__name__}({exception.status_code}): {exception}"
    if isinstance(exception, AppError):
        return f"{type(exception).__name__}: {exception}"
    return type(exception).__name__


class AuditSpan:
    def __init__(self, *, scope: str, action: str,
                 object_type: str | None = None, object_id: str | None = None,
                 event_id: str | None = None, checkout_id: str | None = None,
                 meta: Mapping[str, Any] | None = None):
        self.scope = scope
        self.action = action
        self.object_type = object_type
        self.object_id = object_id
        self.event_id = event_id
        self.checkout_id = checkout_id
        self.meta = dict(meta or {})
        self._t0 = 0.0

    async def __aenter__(self):
        self._t0 = time.perf_counter()
        started = datetime.now(timezone.utc)
        self.meta.setdefault("occurred_at", started.isoformat(timespec="milliseconds").replace("+00:00", "Z"))
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.meta["duration_ms"] = int((time.perf_counter() - self._t0) * 1000)
        status = AuditStatus.FAIL if exc else AuditStatus.SUCCESS
        await audit_emit(
            scope=self.scope, action=self.action, status=status,
            object_type=self.object_type, object_id=self.object_id,
            event_id=self.event_id, checkout_id=self.checkout_id,
            reason=_reason_from_exception(exc), meta=self.meta
        )
        return False
