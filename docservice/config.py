"""Configuration dataclasses for document stores and services."""

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from docservice.adapters.montydb import Datastore
    from docservice.core.events import EventBus
    from docservice.core.validation import RecordValidator


@dataclass
class StoreConfig:
    """Document store location configuration."""

    path: Optional[Path] = None  # None keeps everything in memory
    database: str = "docservice"


@dataclass
class PaginateConfig:
    """Default and maximum page size for paginated finds."""

    default: Optional[int] = None
    max: Optional[int] = None


@dataclass
class ServiceOptions:
    """Options for a DocumentService, fixed at construction."""

    model: Optional["Datastore"] = None
    id_field: str = "_id"
    schema: Optional[dict[str, Any]] = None
    validator: Optional["RecordValidator"] = None
    paginate: Optional[PaginateConfig] = None
    events: Optional["EventBus"] = None
    path: Optional[str] = None  # resource name used for event types
