"""FastAPI dependency injection."""

from typing import Annotated
from fastapi import Depends, Request

from docservice import DocumentService, NotFound


async def get_service(request: Request, service_path: str) -> DocumentService:
    """Get the DocumentService mounted at service_path."""
    services: dict[str, DocumentService] = request.app.state.services
    if service_path not in services:
        raise NotFound(f"Service '{service_path}' is not registered")
    return services[service_path]


ServiceDep = Annotated[DocumentService, Depends(get_service)]
