from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.core.security import CurrentUser, require_admin
from storefront.db.session import get_db
from storefront import models
from storefront.schemas.orders import OrderOut, StatusChangeResponse
from storefront.services.orders import status as order_status
from storefront.services.orders.status import InvalidStatusTransition

router = APIRouter(prefix="/admin/orders", tags=["admin"])


def _get_or_404(db: Session, order_id: int) -> models.Order:
    order = db.get(models.Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def _change_response(change: order_status.StatusChange) -> StatusChangeResponse:
    return StatusChangeResponse(
        order=change.order,
        previous_status=change.previous,
        status=change.order.status,
        status_label=order_status.STATUS_LABELS[change.order.status],
        points_awarded=change.points_awarded,
    )


@router.get("", response_model=List[OrderOut])
def list_orders(
    filter: str = Query("active"),
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
):
    if filter not in ("active", "all") and filter not in order_status.ALLOWED_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid filter")
    return order_status.list_orders(db, view=filter)


@router.get("/{order_id}", response_model=OrderOut)
def get_order_admin(order_id: int, db: Session = Depends(get_db), _: CurrentUser = Depends(require_admin)):
    return _get_or_404(db, order_id)


@router.post("/{order_id}/advance", response_model=StatusChangeResponse)
def advance_order(order_id: int, db: Session = Depends(get_db), _: CurrentUser = Depends(require_admin)):
    order = _get_or_404(db, order_id)
    try:
        change = order_status.advance(db, order)
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _change_response(change)


@router.post("/{order_id}/cancel", response_model=StatusChangeResponse)
def cancel_order(order_id: int, db: Session = Depends(get_db), _: CurrentUser = Depends(require_admin)):
    order = _get_or_404(db, order_id)
    try:
        change = order_status.cancel(db, order)
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _change_response(change)
