"""
Domain Layer - shared building blocks

Base classes used by the booking domain:
- Entities and aggregate roots (identity, versioning, recorded events)
- Value objects and string status enums
- Domain events
- Domain exceptions, translated to HTTP responses by the API layer
"""

from app.core.domain.entities import AggregateRoot, Entity, generate_uuid_str
from app.core.domain.events import DomainEvent
from app.core.domain.exceptions import (
    DomainException,
    EntityNotFoundException,
    IntegrationException,
    InvalidOperationException,
    ValidationException,
)
from app.core.domain.value_objects import StatusEnum, ValueObject

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    "generate_uuid_str",
    # Events
    "DomainEvent",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "InvalidOperationException",
    "IntegrationException",
    # Value Objects
    "ValueObject",
    "StatusEnum",
]
