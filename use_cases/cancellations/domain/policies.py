"""
Refund Policies - Pure Business Rules.

These policies encapsulate the business rules for cancelling purchased
travel products. They have NO dependencies on databases or external
services. All data needed for evaluation is passed in as parameters.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional

from core.domain import PolicyEngine, ensure_utc, hours_between

from .models import (
    CancelCondition,
    CancellationWindow,
    FULL_REFUND,
    NO_CANCELLATION_ALLOWED,
    NO_REFUND,
    NO_REFUND_ACTIVATED,
    NO_REFUND_WINDOW_EXPIRED,
    Product,
    RefundDecision,
)
from .overrides import (
    EvaluationContext,
    OverrideRegistry,
    ProximityServiceSignals,
    ServiceStateSignals,
    default_override_registry,
)

logger = logging.getLogger(__name__)


class WindowMatching(str, Enum):
    """
    How a window threshold is read.

    LEAD_TIME: a window applies when the customer cancels at least
        `hours_before_service` hours ahead; the largest satisfied threshold wins.
    WITHIN_WINDOW: a window applies when the customer cancels within
        `hours_before_service` hours of service; the smallest covering threshold wins.
    """
    LEAD_TIME = "lead_time"
    WITHIN_WINDOW = "within_window"


def refund_policy_name(refund_percentage: float) -> str:
    """Label for a matched window: full_refund, no_refund or '<pct>_percent_refund'."""
    if refund_percentage == 100:
        return FULL_REFUND
    if refund_percentage == 0:
        return NO_REFUND
    if float(refund_percentage).is_integer():
        return f"{int(refund_percentage)}_percent_refund"
    return f"{refund_percentage}_percent_refund"


def find_applicable_window(
    windows: Iterable[CancellationWindow],
    hours_before_service: float,
    matching: WindowMatching = WindowMatching.LEAD_TIME,
) -> Optional[CancellationWindow]:
    """
    Select the window that applies at the given lead time.

    Windows may arrive in any order. Among windows sharing a threshold,
    the one with the lowest refund percentage wins.

    Returns:
        The applicable window, or None when no window qualifies
    """
    if matching == WindowMatching.WITHIN_WINDOW:
        ordered = sorted(windows, key=lambda w: (w.hours_before_service, w.refund_percentage))
        for window in ordered:
            if hours_before_service <= window.hours_before_service:
                return window
        return None

    ordered = sorted(windows, key=lambda w: (-w.hours_before_service, w.refund_percentage))
    for window in ordered:
        if window.hours_before_service <= hours_before_service:
            return window
    return None


class RefundPolicyEngine(PolicyEngine):
    """
    Decides whether a product may be cancelled and what is refunded.

    Evaluation order:
        1. Policy forbids cancellation -> no_cancellation_allowed
        2. Policy requires a non-activated product -> no_refund_activated
        3. Provider override rule (see overrides.py)
        4. Window matching -> refund tier, or no_refund_window_expired

    The engine holds no mutable state; one instance can serve any number
    of concurrent callers.
    """

    def __init__(
        self,
        overrides: Optional[OverrideRegistry] = None,
        signals: Optional[ServiceStateSignals] = None,
        matching: WindowMatching = WindowMatching.LEAD_TIME,
    ):
        self.overrides = overrides if overrides is not None else default_override_registry()
        self.signals = signals if signals is not None else ProximityServiceSignals()
        self.matching = WindowMatching(matching)

    def evaluate(self, product: Product, evaluation_time: Optional[datetime] = None) -> RefundDecision:
        """
        Evaluate the product's cancellation policy at evaluation_time.

        Args:
            product: A well-formed product record (never modified)
            evaluation_time: The moment treated as "now"; defaults to the current UTC time

        Returns:
            RefundDecision. Rejections are zero-refund decisions, never exceptions.
        """
        now = ensure_utc(evaluation_time) if evaluation_time else datetime.now(timezone.utc)
        hours = hours_between(now, product.service_date_time)
        policy = product.cancellation_policy

        if not policy.can_cancel:
            return self._log(product, RefundDecision.rejection(
                product, NO_CANCELLATION_ALLOWED, "This product cannot be cancelled", hours
            ))

        if policy.cancel_condition == CancelCondition.ONLY_IF_NOT_ACTIVATED and product.is_activated:
            return self._log(product, RefundDecision.rejection(
                product, NO_REFUND_ACTIVATED, "Product has been activated and cannot be cancelled", hours
            ))

        context = EvaluationContext(
            product=product,
            evaluation_time=now,
            hours_before_service=hours,
            signals=self.signals,
        )
        override = self.overrides.check(context)
        if override is not None:
            return self._log(product, override)

        window = find_applicable_window(policy.windows, hours, self.matching)
        if window is None:
            return self._log(product, RefundDecision.rejection(
                product, NO_REFUND_WINDOW_EXPIRED, "Cancellation window has expired", hours
            ))

        return self._log(product, RefundDecision.from_window(
            product, window, refund_policy_name(window.refund_percentage), hours
        ))

    def evaluate_many(self, products: Iterable[Product],
                      evaluation_time: Optional[datetime] = None) -> List[RefundDecision]:
        """Evaluate several products against the same moment."""
        now = ensure_utc(evaluation_time) if evaluation_time else datetime.now(timezone.utc)
        return [self.evaluate(product, now) for product in products]

    @staticmethod
    def _log(product: Product, decision: RefundDecision) -> RefundDecision:
        logger.debug(
            f"Product {product.id} ({product.provider}): {decision.policy_name}, "
            f"refund {decision.refund_amount} {decision.currency} "
            f"at {decision.hours_before_service:.2f}h before service"
        )
        return decision
