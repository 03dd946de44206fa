from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.core.security import CurrentUser, get_current_user
from storefront.db.session import get_db
from storefront import models
from storefront.schemas.orders import OrderListResponse, OrderOut
from storefront.services.orders.status import list_orders

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/mine", response_model=OrderListResponse)
def my_orders(db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    return OrderListResponse(items=list_orders(db, view="all", customer_id=user.id))


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    order = db.get(models.Order, order_id)
    if not order or order.customer_id != user.id:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
