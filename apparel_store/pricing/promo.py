from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Optional, Union

from apparel_store.core.logging_config import logger

from .catalog_loader import PACKAGE_ROOT, CatalogError, read_yaml
from .money import ZERO, D, round_whole

DEFAULT_PROMO_CODES_PATH = PACKAGE_ROOT / "data" / "promo_codes.yaml"

INVALID_MESSAGE = "Invalid or expired promo code"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class PromoCode:
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    user_email: Optional[str] = None
    max_uses: Optional[int] = None
    current_uses: int = 0
    valid_until: Optional[datetime] = None
    is_active: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", self.code.strip().upper())

    def is_redeemable(self, user_email: Optional[str], now: datetime) -> bool:
        if not self.is_active:
            return False
        if self.valid_until is not None and self.valid_until <= now:
            return False
        if self.max_uses is not None and self.current_uses >= self.max_uses:
            return False
        if self.user_email is not None and self.user_email != user_email:
            return False
        return True

    def discount_for(self, order_total: Decimal) -> Decimal:
        if self.discount_type == DiscountType.PERCENTAGE:
            amount = order_total * self.discount_value / 100
        else:
            amount = self.discount_value
        # never more than the order itself
        return round_whole(min(amount, order_total))


@dataclass(frozen=True)
class PromoResult:
    valid: bool
    message: str
    discount_amount: Decimal = ZERO
    code: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[Decimal] = None


class PromoBook:
    """Read-only set of promo codes, looked up case-insensitively."""

    def __init__(self, codes: Iterable[PromoCode] = ()):
        by_code: Dict[str, PromoCode] = {}
        for promo in codes:
            if promo.code in by_code:
                raise ValueError(f"Duplicate promo code: {promo.code}")
            by_code[promo.code] = promo
        self._codes = MappingProxyType(by_code)

    def get(self, code: str) -> Optional[PromoCode]:
        return self._codes.get((code or "").strip().upper())

    def __len__(self) -> int:
        return len(self._codes)

    def __iter__(self):
        return iter(self._codes.values())


def evaluate_promo(
    book: PromoBook,
    code: str,
    order_total: Decimal,
    user_email: Optional[str] = None,
    now: Optional[datetime] = None,
    symbol: str = "₹",
) -> PromoResult:
    now = now or datetime.now(timezone.utc)
    promo = book.get(code)

    if promo is None or not promo.is_redeemable(user_email, now):
        logger.info("promo_rejected", code=(code or "").upper())
        return PromoResult(valid=False, message=INVALID_MESSAGE)

    discount = promo.discount_for(D(order_total))
    logger.info("promo_applied", code=promo.code, discount=str(discount))
    return PromoResult(
        valid=True,
        message=f"Promo code applied! You saved {symbol}{discount:.0f}",
        discount_amount=discount,
        code=promo.code,
        discount_type=promo.discount_type,
        discount_value=promo.discount_value,
    )


def _parse_dt(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value))
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def promo_from_dict(row: Dict[str, Any]) -> PromoCode:
    try:
        return PromoCode(
            code=str(row["code"]),
            discount_type=DiscountType(row["discountType"]),
            discount_value=D(row["discountValue"]),
            user_email=row.get("userEmail"),
            max_uses=row.get("maxUses"),
            current_uses=int(row.get("currentUses", 0)),
            valid_until=_parse_dt(row.get("validUntil")),
            is_active=bool(row.get("isActive", True)),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise CatalogError(f"Invalid promo code entry {row!r}: {e}") from e


def load_promo_book(path: Optional[Union[str, Path]] = None) -> PromoBook:
    resolved = Path(path) if path else DEFAULT_PROMO_CODES_PATH
    raw = read_yaml(resolved) or {}
    rows = raw.get("promoCodes") or []
    book = PromoBook(promo_from_dict(r) for r in rows)
    logger.info("promo_codes_loaded", path=str(resolved), count=len(book))
    return book
