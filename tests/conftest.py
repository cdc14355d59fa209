"""Shared fixtures for the cancellation tests."""

from datetime import datetime, timedelta, timezone

import pytest

from core.events import EventBus
from use_cases.cancellations.data.catalog import ProductCatalog
from use_cases.cancellations.domain.models import (
    CancellationPolicy,
    CancellationWindow,
    Money,
    Product,
)
from use_cases.cancellations.service import CancellationService

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)

LOUNGE_WINDOWS = (
    CancellationWindow(4, 100, "Full refund if cancelled within 4 hours of service time"),
    CancellationWindow(24, 50, "50% refund if cancelled between 4-24 hours before service time"),
)


def make_product(
    hours_until_service: float,
    provider: str = "acme",
    product_type: str = "meal",
    amount="45.00",
    windows=LOUNGE_WINDOWS,
    can_cancel: bool = True,
    cancel_condition=None,
    metadata=None,
    activation_deadline=None,
    product_id: str = "PROD-T1",
) -> Product:
    return Product(
        id=product_id,
        title="Test product",
        provider=provider,
        type=product_type,
        price=Money(amount, "USD"),
        cancellation_policy=CancellationPolicy(
            windows=windows,
            can_cancel=can_cancel,
            cancel_condition=cancel_condition,
        ),
        service_date_time=NOW + timedelta(hours=hours_until_service),
        activation_deadline=activation_deadline,
        metadata=metadata or {},
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def catalog():
    return ProductCatalog.with_sample_data(NOW)


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def published(event_bus):
    """Collects every cancellation event published on the bus."""
    events = []
    for event_type in (
        "cancellation.started",
        "cancellation.completed",
        "cancellation.partial",
        "cancellation.failed",
    ):
        event_bus.subscribe(event_type, events.append)
    return events


@pytest.fixture
def service(catalog, event_bus):
    return CancellationService(catalog, event_bus=event_bus, clock=lambda: NOW)
