"""
Health check route.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_store
from app.models import HealthCheck
from app.store import PasteStore

router = APIRouter()


@router.get("/api/healthz", response_model=HealthCheck, responses={503: {"model": HealthCheck}})
def health_check(store: PasteStore = Depends(get_store)):
    """
    Health check endpoint.
    Returns 200 with ok=true if the storage backend answers, 503 with ok=false otherwise.
    """
    if store.ping():
        return HealthCheck(ok=True)
    return JSONResponse(status_code=503, content={"ok": False})
