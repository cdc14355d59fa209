"""
Domain Layer Base Classes.

Business rules live here with no I/O and no framework imports, so they
can be called the same way from the cancellation service, the developer
scripts and the tests.

Example Usage:
    class RefundPolicyEngine(PolicyEngine):
        def evaluate(self, product, evaluation_time=None) -> RefundDecision:
            ...
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone


@dataclass
class DomainEvent:
    """
    Something that happened to a domain object.

    Published on core.events.EventBus. `correlation_id` ties together the
    events raised while handling one request.
    """
    event_type: str
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    correlation_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)


class PolicyEngine(ABC):
    """
    A set of business rules turning inputs into a decision.

    Implementations must not perform I/O or keep state between calls.
    """

    @abstractmethod
    def evaluate(self, *args, **kwargs) -> Any:
        pass

    def explain(self, *args, **kwargs) -> str:
        """Human-readable outcome; defaults to the decision's message."""
        decision = self.evaluate(*args, **kwargs)
        return getattr(decision, "message", str(decision))


class DomainService(ABC):
    """Coordinates policies, repositories and events for one operation."""

    @abstractmethod
    def execute(self, *args, **kwargs) -> Any:
        pass


@dataclass
class ValidationError:
    """One problem found in caller-supplied data."""
    field: str
    message: str
    code: str = "invalid"


class Validator(ABC):
    """
    Checks caller-supplied data before it reaches a policy.

    Validators report every problem they find and never raise.
    """

    @abstractmethod
    def validate(self, data: Dict[str, Any]) -> List[ValidationError]:
        """Return the problems found in data (empty when valid)."""
        pass

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return not self.validate(data)


# =============================================================================
# TIME HELPERS
# =============================================================================

def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def hours_between(start: datetime, end: datetime) -> float:
    """Signed number of hours from start to end (negative if end is earlier)."""
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 3600


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp (a trailing Z is accepted). Returns None if unparseable."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not value or not isinstance(value, str):
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return ensure_utc(datetime.fromisoformat(value))
    except ValueError:
        return None
