import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront import models

logger = logging.getLogger(__name__)

REWARD_TYPES = ("free_delivery", "free_item", "discount_10", "discount_20", "discount_50", "custom")

REASON_MESSAGES = {
    "reward_not_found": "Recompensa não encontrada",
    "insufficient_points": "Pontos insuficientes",
}


class RedemptionError(ValueError):
    """raised when a redemption cannot move to the requested state."""


class RedemptionResult:
    def __init__(self, redemption: Optional[models.RewardRedemption] = None, reason: Optional[str] = None):
        self.redemption = redemption
        self.reason = reason

    @property
    def ok(self) -> bool:
        return self.redemption is not None

    @property
    def message(self) -> Optional[str]:
        return REASON_MESSAGES.get(self.reason) if self.reason else None


def balance(db: Session, customer_id: str) -> int:
    total = (
        db.query(func.coalesce(func.sum(models.LoyaltyPoint.points), 0))
        .filter(models.LoyaltyPoint.customer_id == customer_id)
        .scalar()
    )
    return int(total or 0)


def history(db: Session, customer_id: str) -> List[models.LoyaltyPoint]:
    return (
        db.query(models.LoyaltyPoint)
        .filter(models.LoyaltyPoint.customer_id == customer_id)
        .order_by(models.LoyaltyPoint.created_at.desc(), models.LoyaltyPoint.id.desc())
        .all()
    )


def list_active_rewards(db: Session) -> List[models.Reward]:
    return (
        db.query(models.Reward)
        .filter(models.Reward.is_active.is_(True))
        .order_by(models.Reward.points_required, models.Reward.sort_order)
        .all()
    )


def redeem(db: Session, customer_id: str, reward_id: int) -> RedemptionResult:
    """exchange points for a reward: debit the ledger, then open a pending redemption."""
    reward = db.get(models.Reward, reward_id)
    if not reward or not reward.is_active:
        return RedemptionResult(reason="reward_not_found")

    if balance(db, customer_id) < reward.points_required:
        logger.warning(f"Customer {customer_id} has not enough points for reward {reward.id}")
        return RedemptionResult(reason="insufficient_points")

    db.add(models.LoyaltyPoint(
        customer_id=customer_id,
        points=-reward.points_required,
        description=f"Resgate: {reward.name}",
    ))
    redemption = models.RewardRedemption(
        customer_id=customer_id,
        reward_id=reward.id,
        points_spent=reward.points_required,
        status="pending",
    )
    db.add(redemption)
    # debit and redemption land in the same commit
    db.commit()
    db.refresh(redemption)
    logger.info(f"Customer {customer_id} redeemed reward {reward.id} for {reward.points_required} points")
    return RedemptionResult(redemption=redemption)


def list_redemptions(db: Session, customer_id: str) -> List[models.RewardRedemption]:
    return (
        db.query(models.RewardRedemption)
        .filter(models.RewardRedemption.customer_id == customer_id)
        .order_by(models.RewardRedemption.created_at.desc(), models.RewardRedemption.id.desc())
        .all()
    )


def list_pending(db: Session, customer_id: str) -> List[dict]:
    redemptions = (
        db.query(models.RewardRedemption)
        .filter(
            models.RewardRedemption.customer_id == customer_id,
            models.RewardRedemption.status == "pending",
        )
        .order_by(models.RewardRedemption.created_at)
        .all()
    )
    pending = []
    for r in redemptions:
        pending.append({
            "id": r.id,
            "reward_id": r.reward_id,
            "points_spent": r.points_spent,
            "status": r.status,
            "reward_type": r.reward.reward_type if r.reward else "custom",
            "reward_name": r.reward.name if r.reward else "Recompensa",
        })
    return pending


def get_pending(db: Session, customer_id: str, redemption_id: int) -> Optional[models.RewardRedemption]:
    redemption = db.get(models.RewardRedemption, redemption_id)
    if not redemption or redemption.customer_id != customer_id or redemption.status != "pending":
        return None
    return redemption


def consume(db: Session, redemption_id: int) -> models.RewardRedemption:
    """flip a pending redemption to used. Only flushes, the caller owns the transaction."""
    redemption = db.get(models.RewardRedemption, redemption_id)
    if not redemption:
        raise RedemptionError(f"Redemption {redemption_id} not found")
    if redemption.status != "pending":
        raise RedemptionError(f"Redemption {redemption_id} is already {redemption.status}")
    redemption.status = "used"
    db.add(redemption)
    db.flush()
    logger.info(f"Redemption {redemption_id} consumed")
    return redemption


def award(db: Session, customer_id: str, order_id: int, item_count: int) -> models.LoyaltyPoint:
    """credit one point per item of a completed order. Only flushes."""
    entry = models.LoyaltyPoint(
        customer_id=customer_id,
        order_id=order_id,
        points=item_count,
        description=f"+{item_count} ponto{'s' if item_count > 1 else ''} - Pedido",
    )
    db.add(entry)
    db.flush()
    logger.info(f"Awarded {item_count} points to customer {customer_id} for order {order_id}")
    return entry
