"""Pytest configuration and shared fixtures."""

import uuid

import pytest

from docservice import Datastore, DocumentService, ServiceOptions

PEOPLE_SCHEMA = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string"},
        "age": {"type": "number"},
    },
}


@pytest.fixture
async def make_service():
    """Factory for services backed by a fresh in-memory datastore."""
    services: list[DocumentService] = []

    def _make(path: str = "people", **options) -> DocumentService:
        # Unique collection names keep in-memory data isolated between tests
        model = Datastore(f"{path}-{uuid.uuid4().hex}")
        service = DocumentService(ServiceOptions(model=model, path=path, **options))
        services.append(service)
        return service

    yield _make

    for service in services:
        await service.close()


@pytest.fixture(params=["_id", "customid"])
async def people(request, make_service) -> DocumentService:
    """People service, once with the default id field and once with a custom one."""
    return make_service(id_field=request.param)


@pytest.fixture
async def people_schema(make_service) -> DocumentService:
    return make_service("people-schema", schema=PEOPLE_SCHEMA)
