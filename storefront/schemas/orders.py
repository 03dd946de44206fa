from typing import List, Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel


class OrderItemOut(BaseModel):
    id: int
    product_id: Optional[str] = None
    product_name: str
    quantity: int
    unit_price: float
    extras: Optional[str] = None
    addons: Optional[List[Dict[str, Any]]] = None

    class Config:
        from_attributes = True


class OrderOut(BaseModel):
    id: int
    number: str
    customer_id: Optional[str] = None
    customer_name: str
    customer_phone: str
    delivery_type: str
    address: Optional[str] = None
    neighborhood: Optional[str] = None
    reference_point: Optional[str] = None
    delivery_fee: float
    subtotal: float
    discount: float
    coupon_code: Optional[str] = None
    total: float
    payment_method: str
    observation: Optional[str] = None
    status: str
    item_count: int
    created_at: datetime
    items: List[OrderItemOut] = []

    class Config:
        from_attributes = True


class OrderListResponse(BaseModel):
    items: List[OrderOut]


class StatusChangeResponse(BaseModel):
    order: OrderOut
    previous_status: str
    status: str
    status_label: str
    points_awarded: int = 0
