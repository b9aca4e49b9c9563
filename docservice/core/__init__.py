"""Core components for document services."""

from docservice.core.events import EventHandler, EventBus, InProcessEventBus, ServiceEvent
from docservice.core.payload import ModifierExpression, Replacement, resolve_payload
from docservice.core.query import TranslatedQuery, translate_query
from docservice.core.service import DocumentService, Page, Params
from docservice.core.validation import (
    JsonSchemaValidator,
    NullValidator,
    RecordValidator,
    ValidationGate,
    Violation,
)

__all__ = [
    "DocumentService",
    "Page",
    "Params",
    "TranslatedQuery",
    "translate_query",
    "Replacement",
    "ModifierExpression",
    "resolve_payload",
    "RecordValidator",
    "JsonSchemaValidator",
    "NullValidator",
    "ValidationGate",
    "Violation",
    "ServiceEvent",
    "EventHandler",
    "EventBus",
    "InProcessEventBus",
]
