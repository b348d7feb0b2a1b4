from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from olt_graph.api.v1.routes_graphs import router as graphs_router
from olt_graph.api.v1.routes_health import router as health_router
from olt_graph.core.config import get_settings
from olt_graph.core.logging import RequestIdMiddleware, configure_logging, get_logger
from olt_graph.observability.metrics import MetricsMiddleware
from olt_graph.observability.metrics import router as metrics_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = get_logger(__name__)
    logger.info(
        "service_startup",
        extra={
            "env": settings.ENV,
            "log_level": settings.LOG_LEVEL,
            "smartolt_base_url": settings.SMARTOLT_BASE_URL,
        },
    )
    if not settings.SMARTOLT_API_KEY.get_secret_value():
        logger.warning("smartolt_api_key_missing")
    try:
        yield
    finally:
        logger.info("service_shutdown")


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(RequestIdMiddleware)
app.add_middleware(MetricsMiddleware)

app.include_router(health_router)
app.include_router(graphs_router)
app.include_router(metrics_router)
