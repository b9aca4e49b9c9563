"""CRUD services over an embedded document store."""

from docservice.config import StoreConfig, PaginateConfig, ServiceOptions
from docservice.core import (
    DocumentService,
    Page,
    Params,
    ServiceEvent,
    EventHandler,
    EventBus,
    InProcessEventBus,
    RecordValidator,
    JsonSchemaValidator,
    NullValidator,
    Violation,
)
from docservice.adapters.montydb import Datastore
from docservice.errors import (
    ConfigurationError,
    ServiceError,
    BadRequest,
    ValidationError,
    NotFound,
    StoreError,
)

__all__ = [
    # Façade
    "DocumentService",
    "Params",
    "Page",
    "create_service",
    # Store
    "Datastore",
    # Config
    "StoreConfig",
    "PaginateConfig",
    "ServiceOptions",
    # Validation
    "RecordValidator",
    "JsonSchemaValidator",
    "NullValidator",
    "Violation",
    # Events
    "ServiceEvent",
    "EventHandler",
    "EventBus",
    "InProcessEventBus",
    # Errors
    "ConfigurationError",
    "ServiceError",
    "BadRequest",
    "ValidationError",
    "NotFound",
    "StoreError",
]


def create_service(options: ServiceOptions | None = None) -> DocumentService:
    """Build a DocumentService from options."""
    return DocumentService(options)
