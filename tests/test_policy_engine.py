"""Tests for RefundPolicyEngine window matching and refund arithmetic."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from conftest import NOW, make_product
from use_cases.cancellations.domain.models import CancellationWindow
from use_cases.cancellations.domain.policies import (
    RefundPolicyEngine,
    WindowMatching,
    find_applicable_window,
    refund_policy_name,
)


class TestCancellationNotAllowed:

    @pytest.mark.parametrize("hours", [-5, 0, 3, 10, 500])
    def test_can_cancel_false_always_rejects(self, hours):
        product = make_product(hours, can_cancel=False)

        decision = RefundPolicyEngine().evaluate(product, NOW)

        assert decision.policy_name == "no_cancellation_allowed"
        assert decision.refund_amount == 0
        assert decision.cancellation_fee == Decimal("45.00")
        assert decision.matched_window is None

    def test_can_cancel_false_wins_over_provider_overrides(self):
        product = make_product(-1, provider="mozio", can_cancel=False)

        decision = RefundPolicyEngine().evaluate(product, NOW)

        assert decision.policy_name == "no_cancellation_allowed"


class TestLeadTimeMatching:
    """Default mode: the largest threshold not exceeding the lead time wins."""

    def test_below_every_threshold_is_expired(self):
        decision = RefundPolicyEngine().evaluate(make_product(3), NOW)

        assert decision.policy_name == "no_refund_window_expired"
        assert decision.refund_amount == 0
        assert decision.cancellation_fee == Decimal("45.00")
        assert decision.message == "Cancellation window has expired"

    def test_between_thresholds_uses_lower_window(self):
        decision = RefundPolicyEngine().evaluate(make_product(10), NOW)

        assert decision.policy_name == "full_refund"
        assert decision.refund_amount == Decimal("45.00")
        assert decision.cancellation_fee == 0
        assert decision.matched_window.hours_before_service == 4

    def test_beyond_every_threshold_uses_highest_window(self):
        decision = RefundPolicyEngine().evaluate(make_product(30), NOW)

        assert decision.policy_name == "50_percent_refund"
        assert decision.refund_amount == Decimal("22.50")
        assert decision.cancellation_fee == Decimal("22.50")
        assert decision.message == "50% refund if cancelled between 4-24 hours before service time"

    def test_exact_threshold_is_inclusive(self):
        decision = RefundPolicyEngine().evaluate(make_product(24), NOW)

        assert decision.policy_name == "50_percent_refund"

    def test_window_order_in_storage_does_not_matter(self):
        reversed_windows = tuple(reversed(make_product(10).cancellation_policy.windows))

        decision = RefundPolicyEngine().evaluate(make_product(10, windows=reversed_windows), NOW)

        assert decision.policy_name == "full_refund"

    def test_zero_percent_window_is_no_refund(self):
        windows = (CancellationWindow(2, 0, "No refund - too close to pickup time"),)

        decision = RefundPolicyEngine().evaluate(make_product(8, windows=windows), NOW)

        assert decision.policy_name == "no_refund"
        assert decision.refund_amount == 0
        assert decision.cancellation_fee == Decimal("45.00")
        assert decision.matched_window == windows[0]

    def test_policy_without_windows_is_expired(self):
        decision = RefundPolicyEngine().evaluate(make_product(100, windows=()), NOW)

        assert decision.policy_name == "no_refund_window_expired"

    def test_service_already_passed_for_unknown_provider(self):
        windows = (CancellationWindow(0, 100, "Full refund"),)

        decision = RefundPolicyEngine().evaluate(make_product(-5, windows=windows), NOW)

        assert decision.policy_name == "no_refund_window_expired"
        assert decision.hours_before_service == pytest.approx(-5)


class TestWithinWindowMatching:
    """Windows read as 'cancelled within N hours of service'."""

    @pytest.fixture
    def engine(self):
        return RefundPolicyEngine(matching=WindowMatching.WITHIN_WINDOW)

    def test_within_four_hours_is_full_refund(self, engine):
        decision = engine.evaluate(make_product(3), NOW)

        assert decision.policy_name == "full_refund"
        assert decision.refund_amount == Decimal("45.00")
        assert decision.cancellation_fee == 0

    def test_between_four_and_twenty_four_hours_is_half_refund(self, engine):
        decision = engine.evaluate(make_product(10), NOW)

        assert decision.policy_name == "50_percent_refund"
        assert decision.refund_amount == Decimal("22.50")
        assert decision.cancellation_fee == Decimal("22.50")

    def test_beyond_all_windows_is_expired(self, engine):
        decision = engine.evaluate(make_product(30), NOW)

        assert decision.policy_name == "no_refund_window_expired"
        assert decision.refund_amount == 0
        assert decision.cancellation_fee == Decimal("45.00")

    def test_matching_mode_accepts_string(self):
        engine = RefundPolicyEngine(matching="within_window")

        assert engine.matching is WindowMatching.WITHIN_WINDOW


class TestTieBreak:

    @pytest.mark.parametrize("order", [0, 1])
    def test_identical_thresholds_lowest_percentage_wins(self, order):
        windows = [CancellationWindow(10, 100, "generous"), CancellationWindow(10, 40, "strict")]
        if order:
            windows.reverse()

        decision = RefundPolicyEngine().evaluate(make_product(12, windows=tuple(windows)), NOW)

        assert decision.policy_name == "40_percent_refund"
        assert decision.refund_amount == Decimal("18.00")
        assert decision.message == "strict"

    def test_tie_break_applies_in_within_window_mode(self):
        windows = (CancellationWindow(10, 100, "generous"), CancellationWindow(10, 40, "strict"))

        window = find_applicable_window(windows, 5, WindowMatching.WITHIN_WINDOW)

        assert window.description == "strict"


class TestRefundArithmetic:

    def test_fractional_percentage_rounds_refund_to_cents(self):
        windows = (CancellationWindow(0, 33.5, "A third-ish"),)

        decision = RefundPolicyEngine().evaluate(make_product(5, windows=windows), NOW)

        assert decision.policy_name == "33.5_percent_refund"
        assert decision.refund_amount == Decimal("15.08")
        assert decision.cancellation_fee == Decimal("29.92")

    def test_currency_is_carried_through(self):
        decision = RefundPolicyEngine().evaluate(make_product(30), NOW)

        assert decision.currency == "USD"

    @pytest.mark.parametrize("hours", [x / 2 for x in range(-4, 100)])
    def test_refund_plus_fee_equals_price(self, hours):
        windows = (
            CancellationWindow(0, 10, "a"),
            CancellationWindow(3, 37, "b"),
            CancellationWindow(12, 66.6, "c"),
            CancellationWindow(36, 100, "d"),
        )
        product = make_product(hours, amount="19.99", windows=windows)

        decision = RefundPolicyEngine().evaluate(product, NOW)

        assert decision.refund_amount + decision.cancellation_fee == product.price.amount

    @pytest.mark.parametrize("percentage,label", [
        (100, "full_refund"),
        (0, "no_refund"),
        (75, "75_percent_refund"),
        (75.0, "75_percent_refund"),
        (12.5, "12.5_percent_refund"),
    ])
    def test_refund_policy_name(self, percentage, label):
        assert refund_policy_name(percentage) == label


class TestDeterminism:

    def test_identical_inputs_give_identical_decisions(self):
        product = make_product(30)
        engine = RefundPolicyEngine()

        assert engine.evaluate(product, NOW) == engine.evaluate(product, NOW)

    def test_naive_evaluation_time_is_treated_as_utc(self):
        product = make_product(10)
        engine = RefundPolicyEngine()

        assert engine.evaluate(product, NOW.replace(tzinfo=None)) == engine.evaluate(product, NOW)

    def test_evaluation_time_defaults_to_current_time(self):
        upcoming = replace(
            make_product(0),
            service_date_time=datetime.now(timezone.utc) + timedelta(hours=48),
        )

        decision = RefundPolicyEngine().evaluate(upcoming)

        assert decision.policy_name == "50_percent_refund"
        assert decision.hours_before_service == pytest.approx(48, abs=0.1)

    def test_engine_does_not_modify_product(self):
        product = make_product(10, metadata={"accessType": "single_use"})
        before = (product.metadata.copy(), product.cancellation_policy)

        RefundPolicyEngine().evaluate(product, NOW)

        assert (product.metadata, product.cancellation_policy) == before


class TestMonotonicity:

    @pytest.mark.parametrize("provider", ["acme", "dragonpass", "mozio", "airalo"])
    def test_moving_closer_never_increases_refund(self, provider):
        windows = (
            CancellationWindow(0, 0, "none"),
            CancellationWindow(2, 25, "quarter"),
            CancellationWindow(6, 50, "half"),
            CancellationWindow(24, 100, "full"),
        )
        engine = RefundPolicyEngine()
        previous = None
        for step in range(100, -10, -1):
            hours = step / 2
            decision = engine.evaluate(make_product(hours, provider=provider, windows=windows), NOW)
            if previous is not None:
                assert decision.refund_amount <= previous
            previous = decision.refund_amount


class TestExplain:

    def test_explain_returns_decision_message(self):
        assert RefundPolicyEngine().explain(make_product(10), NOW) == (
            "Full refund if cancelled within 4 hours of service time"
        )

    def test_evaluate_many_uses_one_moment(self):
        products = [make_product(3), make_product(10), make_product(30)]

        decisions = RefundPolicyEngine().evaluate_many(products, NOW)

        assert [d.policy_name for d in decisions] == [
            "no_refund_window_expired",
            "full_refund",
            "50_percent_refund",
        ]
