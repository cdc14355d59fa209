"""
Cancellations Domain Layer.

Contains pure business logic for cancelling travel products.
No database access or I/O - just business rules.
"""

from .models import (
    CancelCondition,
    CancellationPolicy,
    CancellationWindow,
    Money,
    Product,
    ProductType,
    Provider,
    RefundDecision,
)
from .overrides import (
    OverrideRegistry,
    ProximityServiceSignals,
    ServiceStateSignals,
    default_override_registry,
)
from .policies import (
    RefundPolicyEngine,
    WindowMatching,
    find_applicable_window,
)
from .validation import (
    CancellationRequest,
    CancellationRequestValidator,
)

__all__ = [
    "CancelCondition",
    "CancellationPolicy",
    "CancellationWindow",
    "Money",
    "Product",
    "ProductType",
    "Provider",
    "RefundDecision",
    "OverrideRegistry",
    "ProximityServiceSignals",
    "ServiceStateSignals",
    "default_override_registry",
    "RefundPolicyEngine",
    "WindowMatching",
    "find_applicable_window",
    "CancellationRequest",
    "CancellationRequestValidator",
]
