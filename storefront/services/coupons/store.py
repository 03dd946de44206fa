import logging
import re
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront import models

logger = logging.getLogger(__name__)

COUPON_TYPES = ("percentage", "fixed", "free_delivery")

REASON_MESSAGES = {
    "not_found": "Cupom inválido ou inexistente",
    "expired": "Cupom expirado",
    "already_used": "Você já utilizou este cupom",
}


class CouponError(ValueError):
    """raised when a coupon write breaks a coupon invariant."""


class CouponValidationResult:
    def __init__(self, coupon: Optional[models.Coupon] = None, reason: Optional[str] = None):
        self.coupon = coupon
        self.reason = reason

    @property
    def valid(self) -> bool:
        return self.coupon is not None and self.reason is None

    @property
    def message(self) -> Optional[str]:
        return REASON_MESSAGES.get(self.reason) if self.reason else None


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def normalize_phone(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def _check_terms(coupon_type: str, value: Decimal) -> Decimal:
    if coupon_type not in COUPON_TYPES:
        raise CouponError(f"Invalid coupon type. Must be one of: {', '.join(COUPON_TYPES)}")
    if coupon_type == "free_delivery":
        return Decimal("0")
    if value <= 0:
        raise CouponError("Preencha o valor do desconto")
    if coupon_type == "percentage" and value > 100:
        raise CouponError("Percentual máximo é 100%")
    return value


def get_coupon(db: Session, coupon_id: int) -> Optional[models.Coupon]:
    return db.get(models.Coupon, coupon_id)


def get_by_code(db: Session, code: str) -> Optional[models.Coupon]:
    return db.query(models.Coupon).filter(models.Coupon.code == normalize_code(code)).first()


def validate(db: Session, code: Optional[str], customer_phone: Optional[str] = None, now: Optional[datetime] = None) -> CouponValidationResult:
    coupon = (
        db.query(models.Coupon)
        .filter(models.Coupon.code == normalize_code(code), models.Coupon.is_active.is_(True))
        .first()
    )
    if not coupon:
        return CouponValidationResult(reason="not_found")

    now = now or datetime.utcnow()
    if coupon.expires_at and coupon.expires_at < now:
        return CouponValidationResult(reason="expired")

    if customer_phone:
        phone = normalize_phone(customer_phone)
        if phone in {normalize_phone(p) for p in coupon.used_by}:
            return CouponValidationResult(reason="already_used")

    return CouponValidationResult(coupon=coupon)


def mark_used(db: Session, coupon_id: int, customer_phone: str) -> bool:
    """record that a phone used the coupon; returns False when it was already recorded.

    Only flushes, the caller owns the transaction.
    """
    coupon = db.get(models.Coupon, coupon_id)
    if coupon is None:
        raise CouponError(f"Coupon {coupon_id} not found")
    phone = normalize_phone(customer_phone)
    if phone in coupon.used_by:
        return False
    coupon.uses.append(models.CouponUse(phone=phone))
    db.flush()
    logger.info(f"Coupon {coupon.code} marked used by {phone}")
    return True


def list_coupons(db: Session, active: Optional[bool] = None) -> List[models.Coupon]:
    q = db.query(models.Coupon)
    if active is not None:
        q = q.filter(models.Coupon.is_active.is_(active))
    return q.order_by(models.Coupon.created_at.desc()).all()


def create(db: Session, code: str, coupon_type: str, value, is_active: bool = True, expires_at: Optional[datetime] = None) -> models.Coupon:
    code = normalize_code(code)
    if not code:
        raise CouponError("Preencha o código do cupom")
    if get_by_code(db, code):
        raise CouponError("Coupon code already exists")

    coupon = models.Coupon(
        code=code,
        type=coupon_type,
        value=_check_terms(coupon_type, Decimal(str(value or 0))),
        is_active=is_active,
        expires_at=expires_at,
    )
    db.add(coupon)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise CouponError("Coupon code already exists") from e
    db.refresh(coupon)
    logger.info(f"Coupon {coupon.code} created ({coupon.type})")
    return coupon


def update(db: Session, coupon: models.Coupon, **changes) -> models.Coupon:
    if changes.get("code") is not None:
        code = normalize_code(changes["code"])
        if not code:
            raise CouponError("Preencha o código do cupom")
        other = get_by_code(db, code)
        if other and other.id != coupon.id:
            raise CouponError("Coupon code already exists")
        coupon.code = code

    coupon_type = changes.get("type") or coupon.type
    value = changes.get("value")
    if changes.get("type") is not None or value is not None:
        value = Decimal(str(value if value is not None else coupon.value))
        coupon.value = _check_terms(coupon_type, value)
        coupon.type = coupon_type

    if changes.get("is_active") is not None:
        coupon.is_active = bool(changes["is_active"])

    if "expires_at" in changes:
        coupon.expires_at = changes["expires_at"]

    db.add(coupon)
    db.commit()
    db.refresh(coupon)
    return coupon


def set_active(db: Session, coupon: models.Coupon, active: bool) -> models.Coupon:
    coupon.is_active = active
    db.add(coupon)
    db.commit()
    db.refresh(coupon)
    logger.info(f"Coupon {coupon.code} {'activated' if active else 'deactivated'}")
    return coupon


def delete(db: Session, coupon: models.Coupon) -> None:
    if coupon.uses:
        raise CouponError("Cannot delete a coupon that has been used. Consider deactivating instead.")
    db.delete(coupon)
    db.commit()
