"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from docservice import DocumentService, ServiceError
from restapp.config import AppConfig

logger = logging.getLogger(__name__)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Serialize service errors with their status code."""
    if exc.code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.code, content=exc.to_dict())


def create_app(
    services: Optional[Mapping[str, DocumentService]] = None,
    app_config: Optional[AppConfig] = None,
) -> FastAPI:
    """Create a FastAPI application serving each service under /<path>."""

    app_config = app_config or AppConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Shutdown: close datastores
        for service in app.state.services.values():
            await service.close()

    app = FastAPI(
        title=app_config.title,
        lifespan=lifespan,
        debug=app_config.debug,
    )
    app.state.services = dict(services or {})
    app.state.app_config = app_config
    app.add_exception_handler(ServiceError, service_error_handler)

    from restapp.routes import router

    app.include_router(router)

    logger.info("Mounted services: %s", ", ".join(app.state.services) or "none")
    return app
