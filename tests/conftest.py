from __future__ import annotations

import copy

import pytest
from fastapi.testclient import TestClient

from apparel_store.pricing.catalog_loader import catalog_from_dict, load_catalog
from apparel_store.pricing.item_pricer import ItemPricer
from apparel_store.pricing.totals import TotalsAggregator

# Smallest catalog the schema accepts, plus two SKUs around the GST threshold.
MINIMAL_CATALOG = {
    "currency": "INR",
    "basePrices": {
        "basic-tee": 381,
        "premium-jacket": 2500,
        "near-threshold": 2499.99,
        "heavy-coat": 1000,
    },
    "printCosts": {"centered": 0, "pattern": 85},
    "colorMultipliers": {"white": 1.0, "red": 1.2},
    "sizeMultipliers": {"M": 1.0, "XS": 0.95},
    "itemWeights": {"basic-tee": "light", "heavy-coat": "heavy"},
    "fixedCosts": {
        "shipping": {"light": 54, "heavy": 108},
        "taxRates": {"low": 0.05, "high": 0.18},
        "taxThreshold": 2500,
        "deliveryChargePerItem": 20,
    },
}


@pytest.fixture
def raw_catalog():
    return copy.deepcopy(MINIMAL_CATALOG)


@pytest.fixture
def make_catalog(raw_catalog):
    def _make(**overrides):
        raw = copy.deepcopy(raw_catalog)
        raw.update(overrides)
        return catalog_from_dict(raw, source="test")

    return _make


@pytest.fixture
def catalog():
    # shipped catalog
    return load_catalog()


@pytest.fixture
def pricer(catalog):
    return ItemPricer(catalog)


@pytest.fixture
def aggregator(catalog):
    return TotalsAggregator(catalog)


@pytest.fixture(scope="session")
def client():
    from apparel_store.main import app

    with TestClient(app) as c:
        yield c
