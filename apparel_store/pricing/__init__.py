from .catalog import FixedCosts, LineDefaults, PriceCatalog, WeightClass  # noqa
from .catalog_loader import CatalogError, catalog_from_dict, load_catalog  # noqa
from .item_pricer import ItemPricer, PriceBreakdown  # noqa
from .totals import LineItem, OrderQuote, OrderTotals, PricedLineItem, TotalsAggregator  # noqa
from .promo import PromoBook, PromoCode, PromoResult, evaluate_promo, load_promo_book  # noqa
