"""
Turns a priced cart plus the checkout form into a persisted order.

Consuming the redemption, recording the coupon use and inserting the order
header and items all happen inside one database transaction, so a failure in
any step leaves nothing behind.
"""
import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront import models
from storefront.core.config import settings
from storefront.services.coupons import store as coupon_store
from storefront.services.loyalty import store as loyalty_store
from storefront.services.notify.money import format_brl
from storefront.services.pricing import cart, neighborhoods
from storefront.services.pricing.engine import CouponTerms, PriceQuote, quote
from .validation import full_address, validate_checkout_form

logger = logging.getLogger(__name__)


class CheckoutRejected(ValueError):
    """checkout input that can't become an order."""

    def __init__(self, reason: str, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.missing = missing or []


@dataclass
class CheckoutResult:
    order: models.Order
    item_count: int
    quote: PriceQuote


def _gen_order_number() -> str:
    return f"{random.randint(10000, 99999)}"


def _addons_snapshot(line) -> Optional[list]:
    if not line.addons:
        return None
    return [
        {
            "addon_id": a.addon_id,
            "name": a.name,
            "unit_price": float(cart.money(a.unit_price)),
            "quantity": a.quantity,
            "is_side": a.is_side,
        }
        for a in line.addons
    ]


def _product_name(line) -> str:
    return f"{line.product_name} ({line.size_name})" if line.size_name else line.product_name


def price_checkout(db: Session, request, customer_id: Optional[str] = None):
    """re-run the gates and the pricing server side; returns (quote, coupon, redemption)."""
    if not request.items:
        raise CheckoutRejected("empty_cart", "Carrinho vazio")

    missing = validate_checkout_form(request)
    if missing:
        raise CheckoutRejected("missing_fields", "Preencha os campos obrigatórios", missing)

    if request.delivery_type == "delivery" and not neighborhoods.is_served(request.neighborhood.strip()):
        raise CheckoutRejected("neighborhood_not_served", f"Bairro não atendido: {request.neighborhood}")

    try:
        subtotal = cart.subtotal(request.items)
    except cart.CartLineMismatch as e:
        raise CheckoutRejected("line_total_mismatch", str(e)) from e

    coupon = None
    if request.coupon_code and request.coupon_code.strip():
        if not settings.FEATURE_COUPONS:
            raise CheckoutRejected("coupons_disabled", "Cupons desativados")
        res = coupon_store.validate(db, request.coupon_code, request.customer_phone)
        if not res.valid:
            raise CheckoutRejected(res.reason, res.message)
        coupon = res.coupon

    redemption = None
    if request.redemption_id is not None:
        if not settings.FEATURE_LOYALTY:
            raise CheckoutRejected("loyalty_disabled", "Fidelidade desativada")
        if not customer_id:
            raise CheckoutRejected("redemption_requires_login", "Entre na sua conta para usar recompensas")
        redemption = loyalty_store.get_pending(db, customer_id, request.redemption_id)
        if redemption is None:
            raise CheckoutRejected("redemption_unavailable", "Recompensa indisponível")

    priced = quote(
        subtotal,
        request.delivery_type,
        neighborhood_fee=neighborhoods.fee_for(request.neighborhood.strip()),
        reward_type=redemption.reward.reward_type if redemption and redemption.reward else None,
        coupon=CouponTerms.from_coupon(coupon) if coupon else None,
    )
    if priced.below_minimum:
        raise CheckoutRejected("below_minimum", f"Pedido mínimo de {format_brl(priced.minimum_order)}")

    return priced, coupon, redemption


def assemble_order(db: Session, request, customer_id: Optional[str] = None) -> CheckoutResult:
    priced, coupon, redemption = price_checkout(db, request, customer_id)
    phone = request.customer_phone.strip()
    count = cart.item_count(request.items)

    try:
        if redemption is not None:
            loyalty_store.consume(db, redemption.id)

        if coupon is not None:
            coupon_store.mark_used(db, coupon.id, phone)

        order = models.Order(
            number=_gen_order_number(),
            customer_id=customer_id,
            customer_name=request.customer_name.strip(),
            customer_phone=phone,
            delivery_type=request.delivery_type,
            address=full_address(request) or None,
            neighborhood=request.neighborhood.strip() if request.delivery_type == "delivery" else None,
            reference_point=request.reference_point.strip() or None,
            delivery_fee=priced.delivery_fee,
            subtotal=priced.subtotal,
            discount=priced.discount,
            coupon_code=coupon.code if coupon else None,
            redemption_id=redemption.id if redemption else None,
            total=priced.total,
            payment_method=request.payment_method,
            observation=request.observation.strip() or None,
            status="sent",
            item_count=count,
        )
        db.add(order)
        db.flush()  # need order.id for the items

        for line in request.items:
            db.add(models.OrderItem(
                order_id=order.id,
                product_id=line.product_id,
                product_name=_product_name(line),
                quantity=line.quantity,
                unit_price=cart.money(line.unit_price),
                extras=cart.extras_description(line),
                addons=_addons_snapshot(line),
            ))

        db.commit()
    except IntegrityError as e:
        db.rollback()
        if coupon is None:
            raise
        # another checkout recorded this phone for the coupon after we validated it
        logger.warning(f"Coupon {coupon.code} already used by {phone}, checkout rolled back")
        raise CheckoutRejected("already_used", coupon_store.REASON_MESSAGES["already_used"]) from e
    except Exception as e:
        db.rollback()
        logger.error(f"Checkout rolled back: {e}")
        raise

    db.refresh(order)
    logger.info(f"Order {order.id} (#{order.number}) created: {count} items, total {order.total}")
    return CheckoutResult(order=order, item_count=count, quote=priced)
