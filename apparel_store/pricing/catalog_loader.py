from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from jsonschema import Draft202012Validator

from apparel_store.core.logging_config import logger

from .catalog import (
    DEFAULT_BASE_PRICE,
    DEFAULT_COLORS,
    FixedCosts,
    LineDefaults,
    PriceCatalog,
    WeightClass,
)
from .money import D

PACKAGE_ROOT = Path(__file__).resolve().parent
DEFAULT_CATALOG_PATH = PACKAGE_ROOT / "data" / "catalog.yaml"
CATALOG_SCHEMA_PATH = PACKAGE_ROOT / "schemas" / "catalog.schema.json"


class CatalogError(ValueError):
    """Raised at startup when the catalog file is missing or structurally invalid."""


def _load_schema() -> Dict[str, Any]:
    with CATALOG_SCHEMA_PATH.open("r", encoding="utf-8") as f:
        return json.load(f)


def validate_catalog_dict(raw: Any, *, source: str = "<catalog>") -> None:
    """
    Fail fast on a malformed catalog.
    Collects every schema violation so one startup run shows all of them.
    """
    if not isinstance(raw, dict):
        raise CatalogError(f"{source}: catalog must be a mapping, got {type(raw).__name__}")

    validator = Draft202012Validator(_load_schema())
    errors = sorted(validator.iter_errors(raw), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        details = "; ".join(
            f"{'/'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}"
            for e in errors
        )
        raise CatalogError(f"{source}: invalid catalog: {details}")


def _amounts(table: Dict[str, Any]) -> Dict[str, Any]:
    return {str(k): D(v) for k, v in (table or {}).items()}


def _id_lists(table: Dict[str, Any]) -> Dict[str, tuple]:
    return {str(k): tuple(str(x) for x in v) for k, v in (table or {}).items()}


def catalog_from_dict(raw: Dict[str, Any], *, source: str = "<catalog>") -> PriceCatalog:
    validate_catalog_dict(raw, source=source)

    fc = raw["fixedCosts"]
    fixed_costs = FixedCosts(
        shipping_rate_light=D(fc["shipping"]["light"]),
        shipping_rate_heavy=D(fc["shipping"]["heavy"]),
        tax_rate_low=D(fc["taxRates"]["low"]),
        tax_rate_high=D(fc["taxRates"]["high"]),
        tax_threshold=D(fc["taxThreshold"]),
        delivery_charge_per_item=D(fc["deliveryChargePerItem"]),
    )

    defaults = raw.get("defaults") or {}
    line = defaults.get("line") or {}
    line_defaults = LineDefaults(
        garment_type=line.get("garmentType", LineDefaults.garment_type),
        color=line.get("color", LineDefaults.color),
        print_style=line.get("printStyle", LineDefaults.print_style),
        size=line.get("size", LineDefaults.size),
    )

    return PriceCatalog(
        base_prices=_amounts(raw["basePrices"]),
        color_multipliers=_amounts(raw["colorMultipliers"]),
        print_costs=_amounts(raw["printCosts"]),
        size_multipliers=_amounts(raw["sizeMultipliers"]),
        item_weights={str(k): WeightClass(v) for k, v in raw["itemWeights"].items()},
        fixed_costs=fixed_costs,
        available_colors=_id_lists(raw.get("availableColors")),
        categories=_id_lists(raw.get("categories")),
        default_base_price=D(defaults.get("basePrice", DEFAULT_BASE_PRICE)),
        default_colors=tuple(defaults.get("colors") or DEFAULT_COLORS),
        line_defaults=line_defaults,
        currency=str(raw.get("currency", "INR")),
    )


def read_yaml(path: Union[str, Path]) -> Any:
    p = Path(path)
    if not p.exists():
        raise CatalogError(f"Catalog file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CatalogError(f"Catalog file is not valid YAML: {p}") from e


@lru_cache(maxsize=8)
def _load_catalog_cached(path: str) -> PriceCatalog:
    catalog = catalog_from_dict(read_yaml(path), source=path)
    logger.info(
        "catalog_loaded",
        path=path,
        garments=len(catalog.base_prices),
        colors=len(catalog.color_multipliers),
        currency=catalog.currency,
    )
    return catalog


def load_catalog(path: Optional[Union[str, Path]] = None) -> PriceCatalog:
    """
    Load + validate the catalog once per path.
    The returned PriceCatalog is immutable, so sharing it between workers is fine.
    """
    resolved = Path(path) if path else DEFAULT_CATALOG_PATH
    return _load_catalog_cached(str(resolved.resolve()))
