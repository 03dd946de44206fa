from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.v1.deps import coupons_enabled
from storefront.core.security import CurrentUser, require_admin
from storefront.db.session import get_db
from storefront import models
from storefront.schemas.coupons import CouponCreate, CouponOut, CouponUpdate
from storefront.services.coupons import store as coupon_store
from storefront.services.coupons.store import CouponError

router = APIRouter(prefix="/admin/coupons", tags=["admin"], dependencies=[Depends(coupons_enabled)])


def _get_or_404(db: Session, coupon_id: int) -> models.Coupon:
    coupon = coupon_store.get_coupon(db, coupon_id)
    if not coupon:
        raise HTTPException(status_code=404, detail="Coupon not found")
    return coupon


@router.get("", response_model=List[CouponOut])
def list_coupons(
    active: Optional[bool] = None,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
):
    return coupon_store.list_coupons(db, active=active)


@router.post("", response_model=CouponOut, status_code=201)
def create_coupon(payload: CouponCreate, db: Session = Depends(get_db), _: CurrentUser = Depends(require_admin)):
    try:
        return coupon_store.create(
            db,
            code=payload.code,
            coupon_type=payload.type,
            value=payload.value,
            is_active=payload.is_active,
            expires_at=payload.expires_at,
        )
    except CouponError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{coupon_id}", response_model=CouponOut)
def get_coupon(coupon_id: int, db: Session = Depends(get_db), _: CurrentUser = Depends(require_admin)):
    return _get_or_404(db, coupon_id)


@router.put("/{coupon_id}", response_model=CouponOut)
def update_coupon(
    coupon_id: int,
    payload: CouponUpdate,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
):
    coupon = _get_or_404(db, coupon_id)
    try:
        return coupon_store.update(db, coupon, **payload.dict(exclude_unset=True))
    except CouponError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{coupon_id}/deactivate", response_model=CouponOut)
def deactivate_coupon(coupon_id: int, db: Session = Depends(get_db), _: CurrentUser = Depends(require_admin)):
    return coupon_store.set_active(db, _get_or_404(db, coupon_id), False)


@router.post("/{coupon_id}/activate", response_model=CouponOut)
def activate_coupon(coupon_id: int, db: Session = Depends(get_db), _: CurrentUser = Depends(require_admin)):
    return coupon_store.set_active(db, _get_or_404(db, coupon_id), True)


@router.delete("/{coupon_id}")
def delete_coupon(coupon_id: int, db: Session = Depends(get_db), _: CurrentUser = Depends(require_admin)):
    coupon = _get_or_404(db, coupon_id)
    try:
        coupon_store.delete(db, coupon)
    except CouponError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Coupon deleted successfully"}
