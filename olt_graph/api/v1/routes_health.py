from fastapi import APIRouter, Request

from olt_graph.core.config import get_settings
from olt_graph.core.logging import get_logger

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request):
    """Liveness check: process is up."""
    settings = get_settings()
    get_logger(__name__).debug("health", extra={"path": str(request.url.path)})
    return {"status": "ok", "service": settings.APP_NAME}


@router.get("/ready")
async def ready(request: Request):
    """Readiness check: SmartOLT credentials are configured."""
    settings = get_settings()
    configured = bool(settings.SMARTOLT_API_KEY.get_secret_value() and settings.SMARTOLT_BASE_URL.strip())
    get_logger(__name__).debug("ready", extra={"path": str(request.url.path), "smartolt_configured": configured})
    return {"status": "ok", "service": settings.APP_NAME, "smartolt_configured": configured}
