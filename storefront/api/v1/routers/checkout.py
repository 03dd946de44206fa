import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.security import CurrentUser, get_optional_user
from storefront.db.session import get_db
from storefront.schemas.checkout import (
    CheckoutRequest,
    CheckoutResponse,
    NeighborhoodOut,
    QuoteOut,
    QuoteRequest,
)
from storefront.services.checkout.assembler import CheckoutRejected, assemble_order
from storefront.services.coupons import store as coupon_store
from storefront.services.loyalty import store as loyalty_store
from storefront.services.notify.whatsapp import compose_order_message, whatsapp_link
from storefront.services.pricing import cart, neighborhoods
from storefront.services.pricing.engine import CouponTerms, quote

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.get("/neighborhoods", response_model=List[NeighborhoodOut])
def list_neighborhoods():
    return neighborhoods.list_neighborhoods()


@router.post("/quote", response_model=QuoteOut)
def quote_cart(
    payload: QuoteRequest,
    db: Session = Depends(get_db),
    user: Optional[CurrentUser] = Depends(get_optional_user),
):
    """price preview for the checkout dialog; coupon problems come back as coupon_error."""
    try:
        subtotal = cart.subtotal(payload.items)
    except cart.CartLineMismatch as e:
        raise HTTPException(status_code=400, detail=str(e))

    coupon = None
    coupon_error = None
    if payload.coupon_code and payload.coupon_code.strip() and settings.FEATURE_COUPONS:
        res = coupon_store.validate(db, payload.coupon_code, payload.customer_phone)
        if res.valid:
            coupon = res.coupon
        else:
            coupon_error = res.message

    reward_type = None
    if payload.redemption_id is not None and user and settings.FEATURE_LOYALTY:
        redemption = loyalty_store.get_pending(db, user.id, payload.redemption_id)
        if redemption and redemption.reward:
            reward_type = redemption.reward.reward_type

    priced = quote(
        subtotal,
        payload.delivery_type,
        neighborhood_fee=neighborhoods.fee_for((payload.neighborhood or "").strip()),
        reward_type=reward_type,
        coupon=CouponTerms.from_coupon(coupon) if coupon else None,
    )
    return QuoteOut(**priced.dict(), coupon_code=coupon.code if coupon else None, coupon_error=coupon_error)


@router.post("", response_model=CheckoutResponse)
def confirm_checkout(
    payload: CheckoutRequest,
    db: Session = Depends(get_db),
    user: Optional[CurrentUser] = Depends(get_optional_user),
):
    try:
        result = assemble_order(db, payload, customer_id=user.id if user else None)
    except CheckoutRejected as e:
        logger.warning(f"Checkout rejected ({e.reason}): {e.message}")
        if e.reason == "missing_fields":
            raise HTTPException(status_code=422, detail={"message": e.message, "missing": e.missing})
        raise HTTPException(status_code=400, detail=e.message)

    message = compose_order_message(result.order)
    return CheckoutResponse(
        order=result.order,
        item_count=result.item_count,
        quote=QuoteOut(**result.quote.dict(), coupon_code=result.order.coupon_code),
        message=message,
        whatsapp_url=whatsapp_link(message),
    )
