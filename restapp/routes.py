"""FastAPI routes exposing document services as REST resources."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request

from docservice import Params
from restapp.dependencies import ServiceDep
from restapp.query import build_query

router = APIRouter(tags=["services"])


def _params(request: Request) -> Params:
    return Params(query=build_query(request.query_params.multi_items()))


@router.get("/{service_path}")
async def find(request: Request, service: ServiceDep):
    """List records, or a page when the service paginates."""
    return await service.find(_params(request))


@router.get("/{service_path}/{id}")
async def get(request: Request, id: str, service: ServiceDep):
    return await service.get(id, _params(request))


@router.post("/{service_path}", status_code=201)
async def create(request: Request, service: ServiceDep, data: Annotated[Any, Body()]):
    return await service.create(data, _params(request))


@router.put("/{service_path}/{id}")
async def update(request: Request, id: str, service: ServiceDep, data: Annotated[Any, Body()]):
    return await service.update(id, data, _params(request))


@router.patch("/{service_path}/{id}")
async def patch(request: Request, id: str, service: ServiceDep, data: Annotated[Any, Body()]):
    return await service.patch(id, data, _params(request))


@router.patch("/{service_path}")
async def patch_many(request: Request, service: ServiceDep, data: Annotated[Any, Body()]):
    """Patch every record matching the query string."""
    return await service.patch(None, data, _params(request))


@router.delete("/{service_path}/{id}")
async def remove(request: Request, id: str, service: ServiceDep):
    return await service.remove(id, _params(request))


@router.delete("/{service_path}")
async def remove_many(request: Request, service: ServiceDep):
    """Remove every record matching the query string."""
    return await service.remove(None, _params(request))
