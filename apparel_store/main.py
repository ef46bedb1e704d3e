# apparel_store/main.py
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apparel_store.core.logging_config import logger, setup_logging
from apparel_store.core.settings import settings
from apparel_store.observability.metrics import router as metrics_router
from apparel_store.routers.pricing import catalog_router, get_catalog, get_promo_book, promo_router, router as pricing_router


# ----------------------------------------------------
# App init
# ----------------------------------------------------
setup_logging()

app = FastAPI(
    title="Apparel Store Pricing",
    description="Unit prices, GST, shipping and order totals for custom apparel carts.",
    version="0.1.0",
)


@app.on_event("startup")
def _load_pricing_data():
    # broken catalog -> CatalogError here, before the first request
    catalog = get_catalog()
    promos = get_promo_book()
    logger.info(
        "startup",
        service=settings.APP_NAME,
        env=settings.APP_ENV,
        garments=len(catalog.base_prices),
        promo_codes=len(promos),
    )


app.include_router(pricing_router)
app.include_router(catalog_router)
app.include_router(promo_router)
app.include_router(metrics_router)  # /metrics


# ----------------------------------------------------
# Health
# ----------------------------------------------------
@app.get("/health", include_in_schema=True)
def health() -> dict:
    return {"status": "ok"}


# ----------------------------------------------------
# Logging middleware
# ----------------------------------------------------
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    start = time.time()

    bound_logger = logger.bind(
        request_id=request.headers.get("X-Request-ID", "unknown"),
        endpoint=str(request.url.path),
        method=request.method,
    )

    response = await call_next(request)
    latency_ms = round((time.time() - start) * 1000, 2)

    bound_logger.bind(status_code=response.status_code, latency_ms=latency_ms).info(
        "request_finished"
    )
    return response


# ----------------------------------------------------
# Middleware
# ----------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred during price calculation."},
    )
