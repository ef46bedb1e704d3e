from __future__ import annotations

from dataclasses import dataclass, field, fields
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from .money import D

# -----------------------------
# Fallbacks for unknown identifiers
# -----------------------------

DEFAULT_BASE_PRICE = D("381")  # men-half-sleeves-t-shirt
DEFAULT_COLOR_MULTIPLIER = D("1.0")
DEFAULT_PRINT_COST = D("0")
DEFAULT_SIZE_MULTIPLIER = D("1.0")
DEFAULT_COLORS: Tuple[str, ...] = ("white", "black")


class WeightClass(str, Enum):
    LIGHT = "light"
    HEAVY = "heavy"


@dataclass(frozen=True)
class FixedCosts:
    shipping_rate_light: Decimal
    shipping_rate_heavy: Decimal
    tax_rate_low: Decimal
    tax_rate_high: Decimal
    tax_threshold: Decimal
    delivery_charge_per_item: Decimal

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, D(getattr(self, f.name)))


@dataclass(frozen=True)
class LineDefaults:
    """Values substituted when a cart line leaves a field out."""

    garment_type: str = "t-shirt"
    color: str = "white"
    print_style: str = "centered"
    size: str = "M"


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


def _frozen_amounts(mapping: Mapping) -> Mapping:
    return MappingProxyType({k: D(v) for k, v in mapping.items()})


@dataclass(frozen=True)
class PriceCatalog:
    """
    Static price tables for the storefront.

    Built once at startup (see catalog_loader) and injected into the pricer.
    Every lookup goes through an accessor below, and each accessor owns its
    fallback, so an unknown SKU/color/style/size never raises.
    """

    base_prices: Mapping[str, Decimal]
    color_multipliers: Mapping[str, Decimal]
    print_costs: Mapping[str, Decimal]
    size_multipliers: Mapping[str, Decimal]
    item_weights: Mapping[str, WeightClass]
    fixed_costs: FixedCosts
    available_colors: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    categories: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    default_base_price: Decimal = DEFAULT_BASE_PRICE
    default_colors: Tuple[str, ...] = DEFAULT_COLORS
    line_defaults: LineDefaults = field(default_factory=LineDefaults)
    currency: str = "INR"

    def __post_init__(self) -> None:
        # read-only views; frozen=True only guards the attributes themselves
        for name in ("base_prices", "color_multipliers", "print_costs", "size_multipliers"):
            object.__setattr__(self, name, _frozen_amounts(getattr(self, name)))
        for name in ("available_colors", "categories"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))
        object.__setattr__(
            self,
            "item_weights",
            MappingProxyType({k: WeightClass(v) for k, v in self.item_weights.items()}),
        )
        object.__setattr__(self, "default_base_price", D(self.default_base_price))

    # -----------------------------
    # Accessors
    # -----------------------------

    def base_price_of(self, garment_type: str) -> Decimal:
        return self.base_prices.get(garment_type, self.default_base_price)

    def color_multiplier_of(self, color: str) -> Decimal:
        return self.color_multipliers.get(color, DEFAULT_COLOR_MULTIPLIER)

    def print_cost_of(self, print_style: str) -> Decimal:
        return self.print_costs.get(print_style, DEFAULT_PRINT_COST)

    def size_multiplier_of(self, size: str) -> Decimal:
        return self.size_multipliers.get(size, DEFAULT_SIZE_MULTIPLIER)

    def weight_class_of(self, garment_type: str) -> WeightClass:
        return self.item_weights.get(garment_type, WeightClass.LIGHT)

    def tax_rate_for(self, unit_price: Decimal) -> Decimal:
        fc = self.fixed_costs
        if unit_price < fc.tax_threshold:
            return fc.tax_rate_low
        return fc.tax_rate_high

    # -----------------------------
    # Storefront queries
    # -----------------------------

    def available_colors_for(self, garment_type: str) -> Tuple[str, ...]:
        return self.available_colors.get(garment_type, self.default_colors)

    def garment_types_by_category(self) -> Dict[str, List[str]]:
        return {name: list(ids) for name, ids in self.categories.items()}
