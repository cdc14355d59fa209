"""
Data Layer Base Classes.

Repositories give the use cases lookup and storage of domain objects
without exposing where those objects live. The cancellation use case
backs them with in-process dictionaries; nothing here assumes that.

- Repositories return domain objects, never raw documents
- Business rules stay in the domain layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class QueryOptions:
    """Filtering, ordering and paging for Repository.find()."""
    limit: int = 100
    offset: int = 0
    order_by: Optional[str] = None
    order_desc: bool = False
    filters: Dict[str, Any] = field(default_factory=dict)


@dataclass
class QueryResult(Generic[T]):
    """One page of a query plus what is needed to fetch the next."""
    data: List[T]
    total_count: int
    has_more: bool
    next_offset: Optional[int] = None


def paginate(items: Sequence[T], options: QueryOptions) -> QueryResult[T]:
    """Cut an already filtered and ordered sequence down to the requested page."""
    total = len(items)
    end = options.offset + options.limit
    has_more = end < total
    return QueryResult(
        data=list(items[options.offset:end]),
        total_count=total,
        has_more=has_more,
        next_offset=end if has_more else None,
    )


class Repository(ABC, Generic[T]):
    """Read/write access to one entity type, keyed by a string id."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Return the entity, or None when the id is unknown."""
        pass

    @abstractmethod
    def find(self, options: Optional[QueryOptions] = None) -> QueryResult[T]:
        pass

    @abstractmethod
    def save(self, entity: T) -> T:
        """Insert or replace the entity under its id."""
        pass

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove the entity. Returns False when nothing was stored under id."""
        pass


class ReadOnlyRepository(ABC, Generic[T]):
    """Lookup-only access for reference data such as the product catalog."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        pass

    @abstractmethod
    def get_all(self) -> List[T]:
        pass
