import logging

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from app.api.topology import router as topology_router
from app.config import settings
from app.errors import register_error_handlers
from app.logging import configure_logging
from app.observability import ObservabilityMiddleware
from app.services.topology import get_rules

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.add_middleware(ObservabilityMiddleware)
register_error_handlers(app)


def _include_api_router(router, dependencies=None):
    app.include_router(router, prefix="/api/v1", dependencies=dependencies)


_include_api_router(topology_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


@app.on_event("startup")
def _load_rules():
    # Fail fast on a misconfigured rules table instead of on the first request.
    get_rules()
    logger.info("%s started", settings.app_name)
