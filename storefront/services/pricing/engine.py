"""
Checkout pricing.

Given the cart subtotal, the delivery choice, an optional loyalty redemption and
an optional (already validated) coupon, work out the delivery fee, the stacked
discount and the total. Pure computation, nothing here touches the database.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from storefront.core.config import settings
from .cart import money

ZERO = Decimal("0")

REWARD_PERCENTS = {
    "discount_10": Decimal("0.10"),
    "discount_20": Decimal("0.20"),
    "discount_50": Decimal("0.50"),
}


@dataclass
class CouponTerms:
    type: str  # percentage|fixed|free_delivery
    value: Decimal = ZERO
    code: Optional[str] = None

    @classmethod
    def from_coupon(cls, coupon) -> "CouponTerms":
        return cls(type=coupon.type, value=Decimal(str(coupon.value or 0)), code=coupon.code)


@dataclass
class PriceQuote:
    subtotal: Decimal
    base_delivery_fee: Decimal
    delivery_fee: Decimal
    is_free_delivery: bool
    reward_percent: Decimal
    reward_discount: Decimal
    coupon_discount: Decimal
    discount: Decimal
    total: Decimal
    minimum_order: Decimal
    below_minimum: bool

    @property
    def missing_to_minimum(self) -> Decimal:
        return max(ZERO, self.minimum_order - self.subtotal)

    def dict(self):
        return {
            "subtotal": float(self.subtotal),
            "base_delivery_fee": float(self.base_delivery_fee),
            "delivery_fee": float(self.delivery_fee),
            "is_free_delivery": self.is_free_delivery,
            "reward_percent": float(self.reward_percent),
            "reward_discount": float(self.reward_discount),
            "coupon_discount": float(self.coupon_discount),
            "discount": float(self.discount),
            "total": float(self.total),
            "minimum_order": float(self.minimum_order),
            "below_minimum": self.below_minimum,
            "missing_to_minimum": float(self.missing_to_minimum),
        }


def percent_for(reward_type: Optional[str]) -> Decimal:
    return REWARD_PERCENTS.get(reward_type or "", ZERO)


def coupon_discount(coupon: Optional[CouponTerms], subtotal: Decimal) -> Decimal:
    if coupon is None:
        return ZERO
    if coupon.type == "percentage":
        return money(subtotal * Decimal(str(coupon.value)) / Decimal("100"))
    if coupon.type == "fixed":
        return min(money(coupon.value), subtotal)
    return ZERO


def is_below_minimum(subtotal: Decimal, minimum_order: Optional[Decimal] = None) -> bool:
    minimum = settings.MINIMUM_ORDER if minimum_order is None else minimum_order
    return money(subtotal) < money(minimum)


def quote(
    subtotal,
    delivery_type: Optional[str],
    neighborhood_fee=ZERO,
    reward_type: Optional[str] = None,
    coupon: Optional[CouponTerms] = None,
    minimum_order: Optional[Decimal] = None,
) -> PriceQuote:
    subtotal = money(subtotal)
    minimum = money(settings.MINIMUM_ORDER if minimum_order is None else minimum_order)

    is_free_delivery = reward_type == "free_delivery" or (coupon is not None and coupon.type == "free_delivery")
    base_fee = money(neighborhood_fee) if delivery_type == "delivery" else ZERO
    delivery_fee = ZERO if is_free_delivery else base_fee

    reward_percent = percent_for(reward_type)
    reward_discount = money(subtotal * reward_percent)
    coupon_off = coupon_discount(coupon, subtotal)

    # stacked discounts never push the total below the delivery fee
    discount = min(reward_discount + coupon_off, subtotal)
    total = money(subtotal - discount + delivery_fee)

    return PriceQuote(
        subtotal=subtotal,
        base_delivery_fee=base_fee,
        delivery_fee=money(delivery_fee),
        is_free_delivery=is_free_delivery,
        reward_percent=reward_percent,
        reward_discount=reward_discount,
        coupon_discount=coupon_off,
        discount=money(discount),
        total=total,
        minimum_order=minimum,
        below_minimum=is_below_minimum(subtotal, minimum),
    )
