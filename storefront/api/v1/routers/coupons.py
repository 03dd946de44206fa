from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.v1.deps import coupons_enabled
from storefront.db.session import get_db
from storefront.schemas.coupons import CouponValidateRequest, CouponValidateResponse
from storefront.services.coupons import store as coupon_store

router = APIRouter(prefix="/coupons", tags=["coupons"], dependencies=[Depends(coupons_enabled)])


@router.post("/validate", response_model=CouponValidateResponse)
def validate_coupon(payload: CouponValidateRequest, db: Session = Depends(get_db)):
    res = coupon_store.validate(db, payload.code, payload.customer_phone)
    return CouponValidateResponse(
        valid=res.valid,
        reason=res.reason,
        message=res.message,
        coupon=res.coupon if res.valid else None,
    )
