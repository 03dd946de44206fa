from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.v1.deps import loyalty_enabled
from storefront.core.security import CurrentUser, get_current_user
from storefront.db.session import get_db
from storefront.schemas.loyalty import (
    LoyaltySummary,
    PendingRedemptionOut,
    RedeemRequest,
    RedemptionOut,
    RewardOut,
)
from storefront.services.loyalty import store as loyalty_store

router = APIRouter(prefix="/loyalty", tags=["loyalty"], dependencies=[Depends(loyalty_enabled)])


@router.get("/me", response_model=LoyaltySummary)
def my_points(db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    return LoyaltySummary(
        customer_id=user.id,
        balance=loyalty_store.balance(db, user.id),
        history=loyalty_store.history(db, user.id),
    )


@router.get("/rewards", response_model=List[RewardOut])
def list_rewards(db: Session = Depends(get_db)):
    return loyalty_store.list_active_rewards(db)


@router.post("/redeem", response_model=RedemptionOut, status_code=201)
def redeem_reward(payload: RedeemRequest, db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    res = loyalty_store.redeem(db, user.id, payload.reward_id)
    if not res.ok:
        status_code = 404 if res.reason == "reward_not_found" else 400
        raise HTTPException(status_code=status_code, detail=res.message)
    return res.redemption


@router.get("/redemptions", response_model=List[RedemptionOut])
def my_redemptions(db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    return loyalty_store.list_redemptions(db, user.id)


@router.get("/redemptions/pending", response_model=List[PendingRedemptionOut])
def my_pending_redemptions(db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    return loyalty_store.list_pending(db, user.id)
