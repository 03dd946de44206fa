from typing import List, Optional, Literal
from datetime import datetime
from pydantic import BaseModel, validator

CouponType = Literal["percentage", "fixed", "free_delivery"]


class CouponCreate(BaseModel):
    code: str
    type: CouponType = "percentage"
    value: float = 0.0
    is_active: bool = True
    expires_at: Optional[datetime] = None

    @validator("code")
    def code_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Preencha o código do cupom")
        return v


class CouponUpdate(BaseModel):
    code: Optional[str] = None
    type: Optional[CouponType] = None
    value: Optional[float] = None
    is_active: Optional[bool] = None
    expires_at: Optional[datetime] = None


class CouponOut(BaseModel):
    id: int
    code: str
    type: str
    value: float
    is_active: bool
    expires_at: Optional[datetime] = None
    used_by: List[str] = []
    created_at: datetime

    class Config:
        from_attributes = True


class CouponValidateRequest(BaseModel):
    code: str
    customer_phone: Optional[str] = None


class CouponValidateResponse(BaseModel):
    valid: bool
    reason: Optional[str] = None
    message: Optional[str] = None
    coupon: Optional[CouponOut] = None
