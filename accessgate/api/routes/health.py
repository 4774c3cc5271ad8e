from fastapi import APIRouter, Depends, Response

from accessgate.api.deps import get_store
from accessgate.core.errors import StoreError
from accessgate.storage.kv import KVStore


router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Liveness probe - always returns 200 if app is running."""
    return {"status": "ok"}


@router.get("/ready")
def readiness(response: Response, store: KVStore = Depends(get_store)) -> dict:
    """Readiness probe - returns 503 if the durable store is unavailable."""
    try:
        store.ping()
        return {"status": "ready"}
    except StoreError as e:
        response.status_code = 503
        return {"status": "not_ready", "error": str(e)}
