"""
Travel Product Cancellations Use Case.

Evaluates provider cancellation policies for purchased travel products
(lounge access, airport transfers, eSIM data plans) and issues
cancellations with the resulting refund and fee.

Components:
- RefundPolicyEngine: pure refund decision logic
- ProductCatalog: product lookup by id or booking reference
- CancellationService: request validation, evaluation and recording

Usage:
    from use_cases.cancellations import CancellationService, ProductCatalog

    service = CancellationService(ProductCatalog.with_sample_data())
    decision = service.quote("PROD-006")
"""

from use_cases.cancellations.data import InMemoryCancellationStore, ProductCatalog
from use_cases.cancellations.domain import (
    CancellationRequest,
    Product,
    RefundDecision,
    RefundPolicyEngine,
    WindowMatching,
)
from use_cases.cancellations.errors import (
    CancellationError,
    InvalidCancellationRequest,
    ProductNotFound,
)
from use_cases.cancellations.service import CancellationEventType, CancellationService

__all__ = [
    "InMemoryCancellationStore",
    "ProductCatalog",
    "CancellationRequest",
    "Product",
    "RefundDecision",
    "RefundPolicyEngine",
    "WindowMatching",
    "CancellationError",
    "InvalidCancellationRequest",
    "ProductNotFound",
    "CancellationEventType",
    "CancellationService",
]
