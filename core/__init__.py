"""
Core Framework.

This module provides the base classes and interfaces shared by use cases.
The layered architecture keeps each concern separate:

1. Domain Layer - Pure business rules, no I/O
2. Data Layer - Repository pattern for data access
3. Events - In-process publish/subscribe for lifecycle notifications

Each use case follows this pattern for consistency and reusability.
"""

from .domain import DomainEvent, DomainService, PolicyEngine, ValidationError, Validator
from .data import QueryOptions, QueryResult, ReadOnlyRepository, Repository, paginate
from .events import EventBus

__all__ = [
    # Domain
    "DomainEvent",
    "DomainService",
    "PolicyEngine",
    "ValidationError",
    "Validator",
    # Data
    "QueryOptions",
    "QueryResult",
    "ReadOnlyRepository",
    "Repository",
    "paginate",
    # Events
    "EventBus",
]
