from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel


class RewardOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    points_required: int
    reward_type: str
    image_url: Optional[str] = None

    class Config:
        from_attributes = True


class LedgerEntryOut(BaseModel):
    id: int
    points: int
    description: Optional[str] = None
    order_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class LoyaltySummary(BaseModel):
    customer_id: str
    balance: int
    history: List[LedgerEntryOut] = []


class RedeemRequest(BaseModel):
    reward_id: int


class RedemptionOut(BaseModel):
    id: int
    reward_id: Optional[int] = None
    points_spent: int
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class PendingRedemptionOut(BaseModel):
    """pending redemption enriched with reward metadata for the checkout screen."""
    id: int
    reward_id: Optional[int] = None
    points_spent: int
    status: str
    reward_type: str
    reward_name: str
