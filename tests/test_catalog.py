"""Tests for the product catalog and the sample data."""

from datetime import timedelta

import pytest

from conftest import NOW, make_product
from use_cases.cancellations.data.catalog import ProductCatalog
from use_cases.cancellations.data.sample_products import build_sample_products


class TestSampleCatalog:

    def test_loads_every_sample_product(self, catalog):
        assert len(catalog) == 11
        assert {p.provider for p in catalog.get_all()} == {"dragonpass", "mozio", "airalo"}

    def test_service_times_are_relative_to_build_time(self, catalog):
        assert catalog.get_by_id("PROD-002").service_date_time == NOW + timedelta(hours=6)
        assert catalog.get_by_id("PROD-009").activation_deadline == NOW + timedelta(days=90)

    def test_esim_products_require_non_activation(self, catalog):
        esim = catalog.get_by_id("PROD-010")

        assert esim.cancellation_policy.cancel_condition == "only_if_not_activated"
        assert esim.is_activated is False

    def test_sample_documents_use_configured_currency(self):
        assert {doc["price"]["currency"] for doc in build_sample_products(NOW)} == {"USD"}


class TestProductCatalog:

    def test_lookup_by_booking_reference(self, catalog):
        assert catalog.get_by_booking_id("DP-456789015").id == "PROD-004"
        assert catalog.get_by_booking_id("20250902-197564").id == "PROD-009"
        assert catalog.get_by_booking_id("unknown") is None

    def test_resolve_prefers_product_id(self, catalog):
        assert catalog.resolve("PROD-001", "MZ-789456123").id == "PROD-001"
        assert catalog.resolve("PROD-404", "MZ-789456123").id == "PROD-006"
        assert catalog.resolve(None, None) is None

    def test_add_replaces_existing_product(self, caplog):
        catalog = ProductCatalog([make_product(1)])

        catalog.add(make_product(5))

        assert len(catalog) == 1
        assert catalog.get_by_id("PROD-T1").service_date_time == NOW + timedelta(hours=5)
        assert "Replacing catalog entry for product PROD-T1" in caplog.text

    def test_malformed_document_rejected(self):
        documents = build_sample_products(NOW)
        del documents[3]["serviceDateTime"]

        with pytest.raises(ValueError):
            ProductCatalog.from_documents(documents)
