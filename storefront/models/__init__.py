from .models import (
    Coupon,
    CouponUse,
    Reward,
    LoyaltyPoint,
    RewardRedemption,
    Order,
    OrderItem,
)

__all__ = [
    "Coupon",
    "CouponUse",
    "Reward",
    "LoyaltyPoint",
    "RewardRedemption",
    "Order",
    "OrderItem",
]
