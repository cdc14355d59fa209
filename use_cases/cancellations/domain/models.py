"""
Cancellation Domain Models.

Immutable value objects describing a purchased travel product, its
cancellation policy, and the refund decision derived from them.
Construction validates the invariants, so a model that exists is
well-formed input for the policy engine.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from core.domain import ensure_utc, parse_timestamp


CENT = Decimal("0.01")


class Provider(str, Enum):
    """Known product providers. Products may carry other provider ids."""
    DRAGONPASS = "dragonpass"
    MOZIO = "mozio"
    AIRALO = "airalo"


class ProductType(str, Enum):
    LOUNGE_ACCESS = "lounge_access"
    AIRPORT_TRANSFER = "airport_transfer"
    ESIM = "esim"
    MEAL = "meal"
    INSURANCE = "insurance"
    TRANSPORT = "transport"


class CancelCondition(str, Enum):
    ONLY_IF_NOT_ACTIVATED = "only_if_not_activated"


class AccessType(str, Enum):
    SINGLE_USE = "single_use"
    MULTI_USE = "multi_use"


def _plain(value: Any) -> Any:
    """Enum members become their plain value; anything else is returned unchanged."""
    return getattr(value, "value", value)


def to_decimal(value: Any) -> Decimal:
    """Convert ints, floats and strings to Decimal without float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class Money:
    """An amount in a single currency. No conversion is ever performed."""
    amount: Decimal
    currency: str

    def __post_init__(self):
        amount = to_decimal(self.amount)
        if amount < 0:
            raise ValueError(f"Money amount must be non-negative, got {amount}")
        if not self.currency:
            raise ValueError("Money currency is required")
        object.__setattr__(self, "amount", amount)


@dataclass(frozen=True)
class CancellationWindow:
    """
    A lead-time threshold paired with the refund percentage it grants.

    Attributes:
        hours_before_service: Threshold in hours (non-negative)
        refund_percentage: Share of the price refunded, 0-100
        description: Customer-facing explanation of the tier
    """
    hours_before_service: float
    refund_percentage: float
    description: str = ""

    def __post_init__(self):
        if not self.hours_before_service >= 0:
            raise ValueError(
                f"hours_before_service must be non-negative, got {self.hours_before_service}"
            )
        if not 0 <= self.refund_percentage <= 100:
            raise ValueError(
                f"refund_percentage must be between 0 and 100, got {self.refund_percentage}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hoursBeforeService": self.hours_before_service,
            "refundPercentage": self.refund_percentage,
            "description": self.description,
        }


@dataclass(frozen=True)
class CancellationPolicy:
    """
    The cancellation rules embedded in a product.

    Windows are stored as given; the engine normalizes their order at
    evaluation time. When can_cancel is False no window is consulted.
    """
    windows: Tuple[CancellationWindow, ...] = ()
    can_cancel: bool = True
    cancel_condition: Optional[CancelCondition] = None

    def __post_init__(self):
        object.__setattr__(self, "windows", tuple(self.windows))
        if self.cancel_condition is not None:
            object.__setattr__(self, "cancel_condition", CancelCondition(self.cancel_condition))


@dataclass(frozen=True)
class Product:
    """
    A purchased travel product as supplied by the catalog.

    Provider and type enum members are stored as their plain values.
    Metadata is a read-only view of a private copy and takes no part in hashing.
    """
    id: str
    provider: str
    type: str
    price: Money
    cancellation_policy: CancellationPolicy
    service_date_time: datetime
    title: str = ""
    activation_deadline: Optional[datetime] = None
    status: str = "confirmed"
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        if not self.id:
            raise ValueError("Product id is required")
        if not self.provider:
            raise ValueError(f"Product {self.id} has no provider")
        object.__setattr__(self, "provider", _plain(self.provider))
        object.__setattr__(self, "type", _plain(self.type))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        object.__setattr__(self, "service_date_time", ensure_utc(self.service_date_time))
        if self.activation_deadline is not None:
            object.__setattr__(self, "activation_deadline", ensure_utc(self.activation_deadline))

    @property
    def booking_id(self) -> Optional[str]:
        return self.metadata.get("bookingId") or self.metadata.get("orderCode")

    @property
    def lounge_id(self) -> Optional[str]:
        return self.metadata.get("loungeId")

    @property
    def is_activated(self) -> bool:
        return bool(self.metadata.get("isActivated", False))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        """
        Build a Product from a catalog document.

        Accepts the camelCase layout used by provider feeds
        (cancellationPolicy, serviceDateTime, ...).

        Raises:
            ValueError: If a required field is missing or malformed
        """
        try:
            policy = data["cancellationPolicy"]
            price = Money(amount=data["price"]["amount"], currency=data["price"]["currency"])
            service_time = parse_timestamp(data["serviceDateTime"])
        except KeyError as e:
            raise ValueError(f"Product document is missing required field {e}") from e
        if service_time is None:
            raise ValueError(f"Invalid serviceDateTime for product {data.get('id')}")

        activation_deadline = None
        if data.get("activationDeadline") is not None:
            activation_deadline = parse_timestamp(data["activationDeadline"])
            if activation_deadline is None:
                raise ValueError(f"Invalid activationDeadline for product {data.get('id')}")

        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            provider=data.get("provider", ""),
            type=data.get("type", ""),
            price=price,
            cancellation_policy=CancellationPolicy(
                windows=windows_from_dicts(policy.get("windows", [])),
                can_cancel=policy.get("canCancel", True),
                cancel_condition=policy.get("cancelCondition"),
            ),
            service_date_time=service_time,
            activation_deadline=activation_deadline,
            status=data.get("status", "confirmed"),
            metadata=dict(data.get("metadata", {})),
        )


def windows_from_dicts(windows: Iterable[Dict[str, Any]]) -> Tuple[CancellationWindow, ...]:
    return tuple(
        CancellationWindow(
            hours_before_service=w["hoursBeforeService"],
            refund_percentage=w["refundPercentage"],
            description=w.get("description", ""),
        )
        for w in windows
    )


@dataclass(frozen=True)
class RefundDecision:
    """
    The outcome of evaluating a product's cancellation policy.

    refund_amount + cancellation_fee always equals the product price.
    A zero refund with a rejection label is a valid outcome, not an error.
    """
    refund_amount: Decimal
    cancellation_fee: Decimal
    currency: str
    policy_name: str
    message: str
    hours_before_service: float
    matched_window: Optional[CancellationWindow] = None

    @property
    def is_refundable(self) -> bool:
        return self.refund_amount > 0

    @property
    def is_full_refund(self) -> bool:
        return self.cancellation_fee == 0 and self.refund_amount > 0

    @classmethod
    def rejection(cls, product: Product, policy_name: str, message: str,
                  hours_before_service: float) -> "RefundDecision":
        """Zero refund, full price retained as the fee."""
        return cls(
            refund_amount=Decimal("0.00"),
            cancellation_fee=product.price.amount,
            currency=product.price.currency,
            policy_name=policy_name,
            message=message,
            hours_before_service=hours_before_service,
        )

    @classmethod
    def from_window(cls, product: Product, window: CancellationWindow, policy_name: str,
                    hours_before_service: float) -> "RefundDecision":
        price = product.price.amount
        refund = (price * to_decimal(window.refund_percentage) / 100).quantize(
            CENT, rounding=ROUND_HALF_UP
        )
        return cls(
            refund_amount=refund,
            cancellation_fee=price - refund,
            currency=product.price.currency,
            policy_name=policy_name,
            message=window.description,
            hours_before_service=hours_before_service,
            matched_window=window,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Render the externally documented refund fields."""
        return {
            "refund_amount": float(self.refund_amount),
            "cancellation_fee": float(self.cancellation_fee),
            "currency": self.currency,
            "refund_policy": self.policy_name,
            "message": self.message,
            "applicable_window": self.matched_window.to_dict() if self.matched_window else None,
        }


# =============================================================================
# POLICY LABELS
# =============================================================================

FULL_REFUND = "full_refund"
NO_REFUND = "no_refund"
NO_CANCELLATION_ALLOWED = "no_cancellation_allowed"
NO_REFUND_ACTIVATED = "no_refund_activated"
NO_REFUND_DEADLINE_PASSED = "no_refund_deadline_passed"
NO_REFUND_SERVICE_PASSED = "no_refund_service_passed"
NO_REFUND_TOO_CLOSE = "no_refund_too_close"
NO_REFUND_VEHICLE_DISPATCHED = "no_refund_vehicle_dispatched"
NO_REFUND_ALREADY_USED = "no_refund_already_used"
NO_REFUND_WINDOW_EXPIRED = "no_refund_window_expired"

REJECTION_LABELS = frozenset({
    NO_CANCELLATION_ALLOWED,
    NO_REFUND_ACTIVATED,
    NO_REFUND_DEADLINE_PASSED,
    NO_REFUND_SERVICE_PASSED,
    NO_REFUND_TOO_CLOSE,
    NO_REFUND_VEHICLE_DISPATCHED,
    NO_REFUND_ALREADY_USED,
    NO_REFUND_WINDOW_EXPIRED,
})


@dataclass
class CancellationRecord:
    """An issued cancellation, as kept for audit and status lookups."""
    cancellation_id: str
    status: str
    booking_id: str
    lounge_id: Optional[str]
    refund_amount: Decimal
    cancellation_fee: Decimal
    currency: str
    refund_policy: str
    estimated_refund_time: str
    message: str
    product_id: str
    product_title: str
    provider: str
    service_date_time: datetime
    created_at: datetime
    decision: RefundDecision
    booking_time: Optional[datetime] = None
    reason: Optional[str] = None
    correlation_id: Optional[str] = None

    @property
    def id(self) -> str:
        return self.cancellation_id

    def to_response(self) -> Dict[str, Any]:
        """The fields returned to whoever requested the cancellation."""
        response = {
            "status": self.status,
            "cancellation_id": self.cancellation_id,
            "booking_id": self.booking_id,
            "refund_amount": float(self.refund_amount),
            "cancellation_fee": float(self.cancellation_fee),
            "currency": self.currency,
            "refund_policy": self.refund_policy,
            "estimated_refund_time": self.estimated_refund_time,
            "message": self.message,
        }
        if self.lounge_id:
            response["lounge_id"] = self.lounge_id
        return response

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for persistence."""
        return {
            **self.to_response(),
            "product_id": self.product_id,
            "product_title": self.product_title,
            "provider": self.provider,
            "service_date_time": self.service_date_time.isoformat(),
            "created_at": self.created_at.isoformat(),
            "booking_time": self.booking_time.isoformat() if self.booking_time else None,
            "reason": self.reason,
            "correlation_id": self.correlation_id,
            "calculation_details": self.decision.to_dict(),
        }
