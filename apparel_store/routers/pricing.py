from __future__ import annotations

import time
from functools import lru_cache
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends

from apparel_store.core.logging_config import logger
from apparel_store.core.settings import get_settings
from apparel_store.observability.metrics import (
    latency_hist,
    order_total_hist,
    promo_validation_counter,
    quote_counter,
)
from apparel_store.pricing.catalog import PriceCatalog
from apparel_store.pricing.catalog_loader import load_catalog
from apparel_store.pricing.item_pricer import ItemPricer
from apparel_store.pricing.money import D, qmoney, to_minor_units
from apparel_store.pricing.promo import PromoBook, PromoResult, evaluate_promo, load_promo_book
from apparel_store.pricing.totals import LineItem, PricedLineItem, TotalsAggregator
from apparel_store.schemas.pricing import (
    CatalogGarmentsResponseV1,
    GarmentColorsResponseV1,
    GarmentConfigV1,
    GarmentListingV1,
    ItemPriceResponseV1,
    OrderTotalsV1,
    PriceBreakdownV1,
    PricedLineV1,
    PromoResultV1,
    PromoValidateRequestV1,
    QuoteRequestV1,
    QuoteResponseV1,
)

# ----------------------------
# Routers
# ----------------------------
router = APIRouter(prefix="/api/pricing", tags=["pricing"])
catalog_router = APIRouter(prefix="/api/catalog", tags=["catalog"])
promo_router = APIRouter(prefix="/api/promo-codes", tags=["promo"])


# ----------------------------
# Dependencies
# ----------------------------
def get_catalog() -> PriceCatalog:
    return load_catalog(get_settings().PRICING_CATALOG_PATH)


@lru_cache
def _promo_book(path: str = None) -> PromoBook:
    return load_promo_book(path)


def get_promo_book() -> PromoBook:
    return _promo_book(get_settings().PROMO_CODES_PATH)


# ----------------------------
# Helpers
# ----------------------------
def _to_line_item(catalog: PriceCatalog, cfg: GarmentConfigV1, quantity: int = 1) -> LineItem:
    return LineItem.with_defaults(
        catalog.line_defaults,
        garment_type=cfg.garment_type,
        color=cfg.color,
        print_style=cfg.print_style,
        size=cfg.size,
        quantity=quantity,
    )


def _line_out(p: PricedLineItem) -> PricedLineV1:
    return PricedLineV1(
        garment_type=p.item.garment_type,
        color=p.item.color,
        print_style=p.item.print_style,
        size=p.item.size,
        quantity=p.item.quantity,
        unit_price=float(p.unit_price),
        line_subtotal=float(p.line_subtotal),
        line_tax=float(p.line_tax),
        line_delivery=float(p.line_delivery),
        tax_rate=float(p.tax_rate),
        weight_class=p.weight_class.value,
    )


def _promo_out(result: PromoResult) -> PromoResultV1:
    return PromoResultV1(
        valid=result.valid,
        message=result.message,
        discount_amount=float(result.discount_amount),
        code=result.code,
        discount_type=result.discount_type.value if result.discount_type else None,
        discount_value=float(result.discount_value) if result.discount_value is not None else None,
    )


def _evaluate(book: PromoBook, code: str, order_total, user_email: Optional[str]) -> PromoResult:
    result = evaluate_promo(
        book,
        code,
        order_total,
        user_email=user_email,
        symbol=get_settings().CURRENCY_SYMBOL,
    )
    promo_validation_counter.labels(result="applied" if result.valid else "rejected").inc()
    return result


# ----------------------------
# Endpoints
# ----------------------------
@router.post("/item", response_model=ItemPriceResponseV1, summary="Unit price for one garment")
def price_item(payload: GarmentConfigV1, catalog: PriceCatalog = Depends(get_catalog)) -> ItemPriceResponseV1:
    t0 = time.perf_counter()
    item = _to_line_item(catalog, payload)
    pricer = ItemPricer(catalog)
    args = (item.garment_type, item.color, item.print_style, item.size)

    unit_price = pricer.price(*args)
    bd = pricer.breakdown(*args)

    response = ItemPriceResponseV1(
        garment_type=item.garment_type,
        color=item.color,
        print_style=item.print_style,
        size=item.size,
        unit_price=float(qmoney(unit_price)),
        display=pricer.price_display(*args, symbol=get_settings().CURRENCY_SYMBOL),
        breakdown=PriceBreakdownV1(
            base_price=float(bd.base_price_with_color_and_print),
            size_surcharge=float(bd.size_surcharge),
            total=float(bd.total),
        ),
        weight_class=catalog.weight_class_of(item.garment_type).value,
        available_colors=list(catalog.available_colors_for(item.garment_type)),
    )
    latency_hist.labels(route="/api/pricing/item").observe(time.perf_counter() - t0)
    return response


@router.post("/quote", response_model=QuoteResponseV1, summary="Priced cart and order totals")
def quote_order(
    payload: QuoteRequestV1,
    catalog: PriceCatalog = Depends(get_catalog),
    promo_book: PromoBook = Depends(get_promo_book),
) -> QuoteResponseV1:
    t0 = time.perf_counter()
    try:
        items = [_to_line_item(catalog, line, line.quantity) for line in payload.items]

        quote = TotalsAggregator(catalog).quote(items)

        totals = quote.totals
        promo_result = None
        discount = D("0")
        if payload.promo_code:
            promo_result = _evaluate(promo_book, payload.promo_code, totals.total, payload.user_email)
            discount = promo_result.discount_amount

        payable = qmoney(totals.total - discount)
    except Exception:
        quote_counter.labels(result="error").inc()
        raise
    finally:
        latency_hist.labels(route="/api/pricing/quote").observe(time.perf_counter() - t0)

    quote_counter.labels(result="success").inc()
    order_total_hist.observe(float(totals.total))
    logger.info(
        "quote_calculated",
        lines=len(items),
        total=str(totals.total),
        discount=str(discount),
        payable=str(payable),
        duration_ms=round((time.perf_counter() - t0) * 1000, 2),
    )

    return QuoteResponseV1(
        currency=catalog.currency,
        lines=[_line_out(p) for p in quote.lines],
        totals=OrderTotalsV1(**{k: float(v) for k, v in totals.as_dict().items()}),
        weight_units=float(quote.weight_units),
        promo=_promo_out(promo_result) if promo_result else None,
        discount=float(discount),
        payable_total=float(payable),
        amount_minor_units=to_minor_units(payable),
    )


@promo_router.post("/validate", response_model=PromoResultV1, summary="Check a promo code against an order total")
def validate_promo(payload: PromoValidateRequestV1, promo_book: PromoBook = Depends(get_promo_book)) -> PromoResultV1:
    t0 = time.perf_counter()
    result = _evaluate(promo_book, payload.code, D(payload.order_total), payload.user_email)
    latency_hist.labels(route="/api/promo-codes/validate").observe(time.perf_counter() - t0)
    return _promo_out(result)


@catalog_router.get("/garments", response_model=CatalogGarmentsResponseV1)
def list_garments(catalog: PriceCatalog = Depends(get_catalog)) -> CatalogGarmentsResponseV1:
    categories: Dict[str, List[GarmentListingV1]] = {}
    for name, garment_ids in catalog.garment_types_by_category().items():
        categories[name] = [
            GarmentListingV1(
                garment_type=g,
                base_price=float(catalog.base_price_of(g)),
                weight_class=catalog.weight_class_of(g).value,
            )
            for g in garment_ids
        ]
    return CatalogGarmentsResponseV1(currency=catalog.currency, categories=categories)


@catalog_router.get("/garments/{garment_type}/colors", response_model=GarmentColorsResponseV1)
def garment_colors(garment_type: str, catalog: PriceCatalog = Depends(get_catalog)) -> GarmentColorsResponseV1:
    return GarmentColorsResponseV1(
        garment_type=garment_type,
        colors=list(catalog.available_colors_for(garment_type)),
    )
