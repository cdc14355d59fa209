"""
Use Cases Package.

Each use case is a self-contained module following the layered
architecture defined in core/:
- domain/: Pure business logic (models, policies, validation)
- data/: Repository pattern for data access
- service.py: Orchestration wiring domain, data and events together

Available use cases:
- cancellations: Refund policy evaluation and cancellation of travel products
"""

from use_cases.cancellations import CancellationService, ProductCatalog, RefundPolicyEngine

__all__ = [
    "CancellationService",
    "ProductCatalog",
    "RefundPolicyEngine",
]
