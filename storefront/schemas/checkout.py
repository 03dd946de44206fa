from typing import List, Optional, Literal
from pydantic import BaseModel, Field

from .orders import OrderOut


class CartAddon(BaseModel):
    addon_id: str
    name: str
    unit_price: float = Field(0.0, ge=0)
    quantity: int = Field(1, gt=0)
    is_side: bool = False  # legacy combo sides (fries, drink)


class CartLine(BaseModel):
    product_id: str
    product_name: str
    size_id: Optional[str] = None
    size_name: Optional[str] = None
    quantity: int = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    addons: List[CartAddon] = []
    line_total: Optional[float] = None


class CheckoutForm(BaseModel):
    """checkout form exactly as the shopper fills it; blanks are allowed here and checked by the gate."""
    payment_method: Optional[Literal["cartao", "dinheiro", "pix"]] = None
    delivery_type: Optional[Literal["delivery", "pickup"]] = None
    customer_name: str = ""
    customer_phone: str = ""
    street: str = ""
    house_number: str = ""
    complement: str = ""
    neighborhood: str = ""
    reference_point: str = ""
    observation: str = ""
    coupon_code: Optional[str] = None
    redemption_id: Optional[int] = None


class CheckoutRequest(CheckoutForm):
    items: List[CartLine]


class QuoteRequest(BaseModel):
    items: List[CartLine]
    delivery_type: Optional[Literal["delivery", "pickup"]] = None
    neighborhood: Optional[str] = None
    coupon_code: Optional[str] = None
    customer_phone: Optional[str] = None
    redemption_id: Optional[int] = None


class QuoteOut(BaseModel):
    subtotal: float
    base_delivery_fee: float
    delivery_fee: float
    is_free_delivery: bool
    reward_percent: float
    reward_discount: float
    coupon_discount: float
    discount: float
    total: float
    minimum_order: float
    below_minimum: bool
    missing_to_minimum: float
    coupon_code: Optional[str] = None
    coupon_error: Optional[str] = None


class NeighborhoodOut(BaseModel):
    name: str
    fee: float


class CheckoutResponse(BaseModel):
    order: OrderOut
    item_count: int
    quote: QuoteOut
    message: str
    whatsapp_url: str
