from fastapi import APIRouter, Response, status
from app.core.dependencies.clients import pix_registry_dependency, redis_dependency
from app.core.redis import redis_healthy

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health(r: redis_dependency, registry: pix_registry_dependency, response: Response):
    redis_ok = await redis_healthy(r)
    if not redis_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "ok" if redis_ok else "degraded", "redis": redis_ok, "pix_sessions": len(registry)}
