from fastapi import APIRouter

from ..infra.redis_client import get_redis
from ..settings import settings

router = APIRouter()


@router.get("/ready")
async def ready():
    """Liveness plus a redis probe when redis backs the store."""
    if settings.storage_backend != "redis":
        return {"ok": True, "storage": "memory"}

    redis_ok = False
    try:
        r = await get_redis()
        await r.ping()
        redis_ok = True
    except Exception:
        pass
    return {"ok": True, "storage": "redis", "redis_ok": redis_ok}
