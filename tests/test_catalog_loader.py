import dataclasses
import json
from decimal import Decimal

import jsonschema
import pytest

from apparel_store.pricing.catalog import WeightClass
from apparel_store.pricing.catalog_loader import (
    CATALOG_SCHEMA_PATH,
    CatalogError,
    catalog_from_dict,
    load_catalog,
)


def test_catalog_schema_is_valid_jsonschema():
    schema = json.loads(CATALOG_SCHEMA_PATH.read_text(encoding="utf-8"))
    jsonschema.Draft202012Validator.check_schema(schema)


def test_shipped_catalog_tables(catalog):
    assert catalog.currency == "INR"
    assert len(catalog.base_prices) == 18
    assert len(catalog.color_multipliers) == 33
    assert set(catalog.print_costs) == {"centered", "pattern", "full-coverage"}
    assert list(catalog.size_multipliers) == ["XS", "S", "M", "L", "XL", "XXL", "XXXL"]

    assert catalog.base_prices["unisex-hoodies"] == Decimal("897")
    assert catalog.color_multipliers["light-peach"] == Decimal("1.1")
    assert catalog.weight_class_of("unisex-sweatshirt") == WeightClass.HEAVY
    assert catalog.weight_class_of("women-cropped-hoodies") == WeightClass.LIGHT


def test_shipped_fixed_costs(catalog):
    fc = catalog.fixed_costs
    assert fc.shipping_rate_light == Decimal("54")
    assert fc.shipping_rate_heavy == Decimal("108")
    assert fc.tax_rate_low == Decimal("0.05")
    assert fc.tax_rate_high == Decimal("0.18")
    assert fc.tax_threshold == Decimal("2500")
    assert fc.delivery_charge_per_item == Decimal("20")


def test_every_multiplier_and_surcharge_is_non_negative(catalog):
    for table in (catalog.base_prices, catalog.color_multipliers, catalog.print_costs, catalog.size_multipliers):
        assert all(v >= 0 for v in table.values())


def test_accessor_fallbacks(catalog):
    assert catalog.base_price_of("nope") == Decimal("381")
    assert catalog.color_multiplier_of("nope") == Decimal("1.0")
    assert catalog.print_cost_of("nope") == Decimal("0")
    assert catalog.size_multiplier_of("nope") == Decimal("1.0")
    assert catalog.weight_class_of("nope") == WeightClass.LIGHT


def test_load_catalog_is_cached(catalog):
    assert load_catalog() is catalog


def test_catalog_cannot_be_changed(catalog):
    with pytest.raises(dataclasses.FrozenInstanceError):
        catalog.default_base_price = Decimal("1")
    with pytest.raises(TypeError):
        catalog.base_prices["unisex-hoodies"] = Decimal("1")


def test_available_colors(catalog):
    assert catalog.available_colors_for("men-full-sleeves-t-shirt") == ("black", "light-gray", "dark-blue", "white")
    assert len(catalog.available_colors_for("women-crop-top")) == 24
    assert catalog.available_colors_for("nope") == ("white", "black")


def test_garment_types_by_category(catalog):
    cats = catalog.garment_types_by_category()
    assert list(cats) == ["mens", "womens", "unisex"]
    assert [len(v) for v in cats.values()] == [6, 4, 3]
    assert "unisex-hoodies" in cats["unisex"]


def test_line_defaults(catalog):
    d = catalog.line_defaults
    assert (d.garment_type, d.color, d.print_style, d.size) == ("t-shirt", "white", "centered", "M")


def test_minimal_catalog_uses_builtin_defaults(make_catalog):
    c = make_catalog()
    assert c.default_base_price == Decimal("381")
    assert c.available_colors_for("basic-tee") == ("white", "black")
    assert c.garment_types_by_category() == {}


@pytest.mark.parametrize(
    "mutate, fragment",
    [
        (lambda raw: raw.pop("fixedCosts"), "fixedCosts"),
        (lambda raw: raw["fixedCosts"].pop("taxThreshold"), "taxThreshold"),
        (lambda raw: raw["basePrices"].update({"bad": -1}), "basePrices/bad"),
        (lambda raw: raw["colorMultipliers"].update({"red": "1.2"}), "colorMultipliers/red"),
        (lambda raw: raw["itemWeights"].update({"basic-tee": "medium"}), "itemWeights/basic-tee"),
        (lambda raw: raw["fixedCosts"]["shipping"].pop("light"), "shipping"),
    ],
)
def test_structural_errors_are_fatal(raw_catalog, mutate, fragment):
    mutate(raw_catalog)
    with pytest.raises(CatalogError) as exc:
        catalog_from_dict(raw_catalog, source="broken.yaml")
    assert "broken.yaml" in str(exc.value)
    assert fragment in str(exc.value)


def test_non_mapping_catalog_is_rejected():
    with pytest.raises(CatalogError):
        catalog_from_dict(["not", "a", "catalog"])


def test_missing_file(tmp_path):
    with pytest.raises(CatalogError):
        load_catalog(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text("basePrices: [unclosed\n", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_load_from_custom_path(tmp_path, raw_catalog):
    import yaml

    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump(raw_catalog), encoding="utf-8")
    c = load_catalog(path)
    assert c.base_price_of("premium-jacket") == Decimal("2500")
    assert load_catalog(str(path)) is c
