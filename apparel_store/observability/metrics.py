# apparel_store/observability/metrics.py
from fastapi import APIRouter
from starlette.responses import Response

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(tags=["observability"])

quote_counter = Counter(
    "apparel_quote_total",
    "Number of order quotes",
    ["result"],  # success|error
)

promo_validation_counter = Counter(
    "apparel_promo_validation_total",
    "Number of promo code checks",
    ["result"],  # applied|rejected
)

order_total_hist = Histogram(
    "apparel_order_total_inr",
    "Order totals before promo discount",
    buckets=(250, 500, 1000, 2500, 5000, 10000, 25000, 50000),
)

latency_hist = Histogram(
    "apparel_api_latency_seconds",
    "API latency per route",
    ["route"],  # e.g. /api/pricing/quote, /api/pricing/item
)


@router.get("/metrics", include_in_schema=True)
def metrics() -> Response:
    # Prometheus expects text/plain; version=0.0.4
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
