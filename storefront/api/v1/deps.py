from fastapi import HTTPException

from storefront.core.config import settings


def coupons_enabled():
    if not settings.FEATURE_COUPONS:
        raise HTTPException(status_code=404, detail="Coupons are disabled")


def loyalty_enabled():
    if not settings.FEATURE_LOYALTY:
        raise HTTPException(status_code=404, detail="Loyalty is disabled")
