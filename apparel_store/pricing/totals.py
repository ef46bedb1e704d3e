from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional

from apparel_store.core.logging_config import logger

from .catalog import LineDefaults, PriceCatalog, WeightClass
from .item_pricer import ItemPricer
from .money import ZERO, qmoney

D = Decimal

HEAVY_WEIGHT_UNITS = D("1.5")
LIGHT_WEIGHT_UNITS = D("1")


# -----------------------------
# Input / output models
# -----------------------------


@dataclass(frozen=True)
class LineItem:
    """One cart entry as the checkout sends it. Never mutated by the engine."""

    garment_type: str
    color: str
    print_style: str
    size: str
    quantity: int = 1

    @classmethod
    def with_defaults(
        cls,
        defaults: LineDefaults,
        *,
        garment_type: Optional[str] = None,
        color: Optional[str] = None,
        print_style: Optional[str] = None,
        size: Optional[str] = None,
        quantity: int = 1,
    ) -> "LineItem":
        # carts built by older clients leave fields empty
        return cls(
            garment_type=garment_type or defaults.garment_type,
            color=color or defaults.color,
            print_style=print_style or defaults.print_style,
            size=size or defaults.size,
            quantity=quantity,
        )


@dataclass(frozen=True)
class PricedLineItem:
    item: LineItem
    unit_price: D
    line_subtotal: D
    line_tax: D
    line_delivery: D
    tax_rate: D
    weight_class: WeightClass

    def rounded(self) -> "PricedLineItem":
        return PricedLineItem(
            item=self.item,
            unit_price=qmoney(self.unit_price),
            line_subtotal=qmoney(self.line_subtotal),
            line_tax=qmoney(self.line_tax),
            line_delivery=qmoney(self.line_delivery),
            tax_rate=self.tax_rate,
            weight_class=self.weight_class,
        )


@dataclass(frozen=True)
class OrderTotals:
    subtotal: D = ZERO
    tax: D = ZERO
    shipping: D = ZERO
    delivery: D = ZERO
    total: D = ZERO

    def as_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "tax": self.tax,
            "shipping": self.shipping,
            "delivery": self.delivery,
            "total": self.total,
        }


@dataclass(frozen=True)
class OrderQuote:
    lines: List[PricedLineItem] = field(default_factory=list)
    totals: OrderTotals = field(default_factory=OrderTotals)
    weight_units: D = ZERO


# -----------------------------
# Aggregator
# -----------------------------


class TotalsAggregator:
    """
    Folds a cart into subtotal / tax / shipping / delivery / total.

    - GST bracket is picked per unit price, then applied to the line subtotal.
    - Delivery is a flat fee per unit.
    - Shipping is computed once per order: ceil(weight units) * light rate,
      where a heavy unit counts 1.5. The heavy rate in the catalog is not used.
    - Everything stays unrounded until the final 2-decimal rounding per field.
    """

    def __init__(self, catalog: PriceCatalog, pricer: Optional[ItemPricer] = None):
        self.catalog = catalog
        self.pricer = pricer or ItemPricer(catalog)

    def price_line(self, item: LineItem) -> PricedLineItem:
        c = self.catalog
        unit_price = self.pricer.price(item.garment_type, item.color, item.print_style, item.size)
        qty = D(item.quantity)
        line_subtotal = unit_price * qty
        tax_rate = c.tax_rate_for(unit_price)
        return PricedLineItem(
            item=item,
            unit_price=unit_price,
            line_subtotal=line_subtotal,
            line_tax=line_subtotal * tax_rate,
            line_delivery=c.fixed_costs.delivery_charge_per_item * qty,
            tax_rate=tax_rate,
            weight_class=c.weight_class_of(item.garment_type),
        )

    def price_lines(self, items: Iterable[LineItem]) -> List[PricedLineItem]:
        return [self.price_line(item).rounded() for item in items]

    def weight_units(self, items: Iterable[LineItem]) -> D:
        units = ZERO
        for item in items:
            per_unit = (
                HEAVY_WEIGHT_UNITS
                if self.catalog.weight_class_of(item.garment_type) == WeightClass.HEAVY
                else LIGHT_WEIGHT_UNITS
            )
            units += per_unit * D(item.quantity)
        return units

    def shipping_for(self, weight_units: D) -> D:
        # round up to the next 500g slab
        return D(math.ceil(weight_units)) * self.catalog.fixed_costs.shipping_rate_light

    def quote(self, items: Iterable[LineItem]) -> OrderQuote:
        items = list(items)
        priced = [self.price_line(item) for item in items]

        subtotal = sum((p.line_subtotal for p in priced), ZERO)
        tax = sum((p.line_tax for p in priced), ZERO)
        delivery = sum((p.line_delivery for p in priced), ZERO)
        weight_units = self.weight_units(items)
        shipping = self.shipping_for(weight_units)
        total = subtotal + tax + shipping + delivery

        totals = OrderTotals(
            subtotal=qmoney(subtotal),
            tax=qmoney(tax),
            shipping=qmoney(shipping),
            delivery=qmoney(delivery),
            total=qmoney(total),
        )

        logger.debug(
            "order_totals_computed",
            lines=len(items),
            weight_units=str(weight_units),
            subtotal=str(totals.subtotal),
            tax=str(totals.tax),
            shipping=str(totals.shipping),
            delivery=str(totals.delivery),
            total=str(totals.total),
        )

        return OrderQuote(
            lines=[p.rounded() for p in priced],
            totals=totals,
            weight_units=weight_units,
        )

    def compute_totals(self, items: Iterable[LineItem]) -> OrderTotals:
        return self.quote(items).totals
