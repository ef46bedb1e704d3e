# apparel_store/schemas/pricing.py
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, conint, constr
from pydantic.alias_generators import to_camel


class _Camel(BaseModel):
    """Storefront JSON is camelCase; python side stays snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


# -----------------------------
# Requests
# -----------------------------


class GarmentConfigV1(_Camel):
    # Empty/missing -> catalog line defaults (t-shirt / white / centered / M)
    garment_type: Optional[str] = None
    color: Optional[str] = None
    print_style: Optional[str] = None
    size: Optional[str] = None


class LineItemV1(GarmentConfigV1):
    quantity: conint(ge=1) = 1  # type: ignore


class QuoteRequestV1(_Camel):
    items: List[LineItemV1] = Field(min_length=1)
    promo_code: Optional[constr(strip_whitespace=True, min_length=1)] = None  # type: ignore
    user_email: Optional[str] = None


class PromoValidateRequestV1(_Camel):
    code: constr(strip_whitespace=True, min_length=1)  # type: ignore
    order_total: PositiveFloat
    user_email: Optional[str] = None


# -----------------------------
# Responses
# -----------------------------


class PriceBreakdownV1(_Camel):
    base_price: float
    size_surcharge: float
    total: float


class ItemPriceResponseV1(_Camel):
    garment_type: str
    color: str
    print_style: str
    size: str
    unit_price: float
    display: str
    breakdown: PriceBreakdownV1
    weight_class: str
    available_colors: List[str]


class PricedLineV1(_Camel):
    garment_type: str
    color: str
    print_style: str
    size: str
    quantity: int
    unit_price: float
    line_subtotal: float
    line_tax: float
    line_delivery: float
    tax_rate: float
    weight_class: str


class OrderTotalsV1(_Camel):
    subtotal: float = Field(ge=0)
    tax: float = Field(ge=0)
    shipping: float = Field(ge=0)
    delivery: float = Field(ge=0)
    total: float = Field(ge=0)


class PromoResultV1(_Camel):
    valid: bool
    message: str
    discount_amount: float = 0.0
    code: Optional[str] = None
    discount_type: Optional[str] = None
    discount_value: Optional[float] = None


class QuoteResponseV1(_Camel):
    currency: str
    lines: List[PricedLineV1]
    totals: OrderTotalsV1
    weight_units: float
    promo: Optional[PromoResultV1] = None
    discount: float = 0.0
    payable_total: float
    # paise, for the payment gateway order
    amount_minor_units: int


class GarmentListingV1(_Camel):
    garment_type: str
    base_price: float
    weight_class: str


class CatalogGarmentsResponseV1(_Camel):
    currency: str
    categories: Dict[str, List[GarmentListingV1]]


class GarmentColorsResponseV1(_Camel):
    garment_type: str
    colors: List[str]
