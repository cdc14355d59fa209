"""
Provider Override Rules.

Each provider may veto cancellation before window matching, based on
product metadata and how close the service is. Rules live in a registry
keyed by provider id, so adding a provider never touches the engine.

"Vehicle dispatched" and "access used" are not stored anywhere yet; they
are answered by a ServiceStateSignals implementation. The default one
derives both from lead time alone. Inject a real implementation once a
provider exposes the actual state.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional

from core.domain import hours_between

from .models import (
    AccessType,
    NO_REFUND_ACTIVATED,
    NO_REFUND_ALREADY_USED,
    NO_REFUND_DEADLINE_PASSED,
    NO_REFUND_SERVICE_PASSED,
    NO_REFUND_TOO_CLOSE,
    NO_REFUND_VEHICLE_DISPATCHED,
    Product,
    Provider,
    RefundDecision,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

# Transfers cannot be cancelled this close to pickup
TRANSFER_MIN_LEAD_HOURS = 0.5

# Vehicles are assumed to be on their way inside this lead time
TRANSFER_DISPATCH_LEAD_HOURS = 1.0

# Lounge access counts as used once the service time has started
LOUNGE_ACCESS_USED_LEAD_HOURS = 0.0


# =============================================================================
# SERVICE STATE SIGNALS
# =============================================================================

class ServiceStateSignals(ABC):
    """
    Answers questions about the real-world state of a booked service.

    Implementations must be side-effect free for the duration of an
    evaluation; the engine may call them from any thread.
    """

    @abstractmethod
    def is_dispatched(self, product: Product, now: datetime) -> bool:
        """Has the transfer vehicle already been dispatched?"""
        pass

    @abstractmethod
    def is_access_used(self, product: Product, now: datetime) -> bool:
        """Has the (single-use) access already been consumed?"""
        pass


class ProximityServiceSignals(ServiceStateSignals):
    """Estimates service state from the time left before service."""

    def __init__(
        self,
        dispatch_lead_hours: float = TRANSFER_DISPATCH_LEAD_HOURS,
        access_used_lead_hours: float = LOUNGE_ACCESS_USED_LEAD_HOURS,
    ):
        self.dispatch_lead_hours = dispatch_lead_hours
        self.access_used_lead_hours = access_used_lead_hours

    def is_dispatched(self, product: Product, now: datetime) -> bool:
        return hours_between(now, product.service_date_time) < self.dispatch_lead_hours

    def is_access_used(self, product: Product, now: datetime) -> bool:
        return hours_between(now, product.service_date_time) < self.access_used_lead_hours


# =============================================================================
# OVERRIDE RULES
# =============================================================================

@dataclass(frozen=True)
class EvaluationContext:
    """Everything an override rule may look at."""
    product: Product
    evaluation_time: datetime
    hours_before_service: float
    signals: ServiceStateSignals

    def reject(self, policy_name: str, message: str) -> RefundDecision:
        return RefundDecision.rejection(
            self.product, policy_name, message, self.hours_before_service
        )


ProviderOverride = Callable[[EvaluationContext], Optional[RefundDecision]]


def esim_override(ctx: EvaluationContext) -> Optional[RefundDecision]:
    """eSIMs are non-refundable once activated, past their activation deadline, or past service start."""
    product = ctx.product
    if product.is_activated:
        return ctx.reject(NO_REFUND_ACTIVATED, "eSIM has been activated and cannot be refunded")
    if product.activation_deadline is not None and ctx.evaluation_time > product.activation_deadline:
        return ctx.reject(NO_REFUND_DEADLINE_PASSED, "eSIM activation deadline has passed")
    if ctx.hours_before_service < 0:
        return ctx.reject(NO_REFUND_SERVICE_PASSED, "eSIM validity period has already started")
    return None


def transfer_override(ctx: EvaluationContext) -> Optional[RefundDecision]:
    hours = ctx.hours_before_service
    if hours < 0:
        return ctx.reject(NO_REFUND_SERVICE_PASSED, "Pickup time has already passed")
    if hours < TRANSFER_MIN_LEAD_HOURS:
        return ctx.reject(NO_REFUND_TOO_CLOSE, "Too close to pickup time to cancel")
    if hours < TRANSFER_DISPATCH_LEAD_HOURS and ctx.signals.is_dispatched(ctx.product, ctx.evaluation_time):
        return ctx.reject(NO_REFUND_VEHICLE_DISPATCHED, "Vehicle has already been dispatched")
    return None


def lounge_override(ctx: EvaluationContext) -> Optional[RefundDecision]:
    if ctx.hours_before_service < 0:
        return ctx.reject(NO_REFUND_SERVICE_PASSED, "Lounge access time has already passed")
    access_type = ctx.product.metadata.get("accessType")
    if access_type == AccessType.SINGLE_USE.value and ctx.signals.is_access_used(
        ctx.product, ctx.evaluation_time
    ):
        return ctx.reject(NO_REFUND_ALREADY_USED, "Single-use lounge access has already been used")
    return None


def _provider_key(provider) -> str:
    return getattr(provider, "value", provider)


class OverrideRegistry:
    """
    Maps provider ids to their override rule.

    Providers without a registered rule fall through to window matching.
    """

    def __init__(self, overrides: Optional[Dict[str, ProviderOverride]] = None):
        self._overrides: Dict[str, ProviderOverride] = {
            _provider_key(provider): override for provider, override in (overrides or {}).items()
        }

    def register(self, provider: str, override: ProviderOverride) -> None:
        self._overrides[_provider_key(provider)] = override

    def unregister(self, provider: str) -> None:
        self._overrides.pop(_provider_key(provider), None)

    def get(self, provider: str) -> Optional[ProviderOverride]:
        return self._overrides.get(_provider_key(provider))

    def providers(self) -> List[str]:
        return sorted(self._overrides)

    def check(self, ctx: EvaluationContext) -> Optional[RefundDecision]:
        """Run the provider's rule, if any. Returns the vetoing decision or None."""
        override = self.get(ctx.product.provider)
        if override is None:
            return None
        decision = override(ctx)
        if decision is not None:
            logger.debug(
                f"Provider override {decision.policy_name} fired for product {ctx.product.id}"
            )
        return decision


def default_override_registry() -> OverrideRegistry:
    """Registry with the rules for every built-in provider."""
    return OverrideRegistry({
        Provider.AIRALO.value: esim_override,
        Provider.MOZIO.value: transfer_override,
        Provider.DRAGONPASS.value: lounge_override,
    })
