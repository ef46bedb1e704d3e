from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .catalog import PriceCatalog
from .money import round_whole

D = Decimal


@dataclass(frozen=True)
class PriceBreakdown:
    """
    Receipt/UI decomposition of one unit price, in whole currency units.

    Each figure is rounded on its own, so base_price_with_color_and_print +
    size_surcharge can differ from total by 1 (e.g. 513 + 77 vs 589).
    Receipts print the figures as-is.
    """

    base_price_with_color_and_print: D
    size_surcharge: D
    total: D


class ItemPricer:
    """Unit price of one garment configuration, straight from the catalog."""

    def __init__(self, catalog: PriceCatalog):
        self.catalog = catalog

    def price(self, garment_type: str, color: str, print_style: str, size: str) -> D:
        """
        (base + print surcharge) * color factor * size factor.
        Not rounded; totals round once at the end.
        """
        c = self.catalog
        base = c.base_price_of(garment_type)
        print_surcharge = c.print_cost_of(print_style)
        color_factor = c.color_multiplier_of(color)
        size_factor = c.size_multiplier_of(size)
        return (base + print_surcharge) * color_factor * size_factor

    def breakdown(self, garment_type: str, color: str, print_style: str, size: str) -> PriceBreakdown:
        c = self.catalog
        with_color_and_print = (c.base_price_of(garment_type) + c.print_cost_of(print_style)) * c.color_multiplier_of(color)
        size_factor = c.size_multiplier_of(size)
        size_surcharge = with_color_and_print * (size_factor - 1)
        total = with_color_and_print * size_factor

        return PriceBreakdown(
            base_price_with_color_and_print=round_whole(with_color_and_print),
            size_surcharge=round_whole(size_surcharge),
            total=round_whole(total),
        )

    def price_display(self, garment_type: str, color: str, print_style: str, size: str, symbol: str = "₹") -> str:
        unit = self.price(garment_type, color, print_style, size)
        return f"{symbol}{round_whole(unit):.0f}"
