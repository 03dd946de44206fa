"""
Order status progression.

sent -> preparing -> delivering -> delivered -> completed, one step at a time.
Any status that isn't terminal may also be cancelled.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from storefront import models
from storefront.services.loyalty import store as loyalty_store

logger = logging.getLogger(__name__)

STATUS_FLOW = ["sent", "preparing", "delivering", "delivered", "completed"]
TERMINAL_STATUSES = {"completed", "cancelled"}
ALLOWED_STATUSES = set(STATUS_FLOW) | {"cancelled"}

STATUS_LABELS = {
    "sent": "Recebido",
    "preparing": "Preparando",
    "delivering": "Saiu p/ Entrega",
    "delivered": "Entregue",
    "completed": "Finalizado",
    "cancelled": "Cancelado",
}


class InvalidStatusTransition(ValueError):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move order from {current} to {target}")
        self.current = current
        self.target = target


class StatusChange:
    def __init__(self, order: models.Order, previous: str, points_awarded: int = 0):
        self.order = order
        self.previous = previous
        self.points_awarded = points_awarded


def next_status(current: str) -> Optional[str]:
    """the status one step ahead, None when the order can't advance."""
    if current not in STATUS_FLOW:
        return None
    idx = STATUS_FLOW.index(current)
    if idx >= len(STATUS_FLOW) - 1:
        return None
    return STATUS_FLOW[idx + 1]


def can_cancel(current: str) -> bool:
    return current in ALLOWED_STATUSES and current not in TERMINAL_STATUSES


def advance(db: Session, order: models.Order) -> StatusChange:
    previous = order.status
    target = next_status(previous)
    if target is None:
        raise InvalidStatusTransition(previous, "next")

    order.status = target
    order.updated_at = datetime.utcnow()
    db.add(order)

    points = 0
    # guests have no ledger to credit
    if target == "completed" and order.customer_id:
        loyalty_store.award(db, order.customer_id, order.id, order.item_count)
        points = order.item_count

    db.commit()
    db.refresh(order)
    logger.info(f"Order {order.id} moved {previous} -> {target}")
    return StatusChange(order, previous, points)


def cancel(db: Session, order: models.Order) -> StatusChange:
    previous = order.status
    if not can_cancel(previous):
        raise InvalidStatusTransition(previous, "cancelled")

    order.status = "cancelled"
    order.updated_at = datetime.utcnow()
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info(f"Order {order.id} cancelled (was {previous})")
    return StatusChange(order, previous)


def list_orders(db: Session, view: str = "active", customer_id: Optional[str] = None) -> List[models.Order]:
    """orders newest first; view is 'active', 'all' or a single status."""
    q = db.query(models.Order)
    if customer_id is not None:
        q = q.filter(models.Order.customer_id == customer_id)
    if view == "active":
        q = q.filter(models.Order.status.notin_(TERMINAL_STATUSES))
    elif view != "all":
        q = q.filter(models.Order.status == view)
    return q.order_by(models.Order.created_at.desc(), models.Order.id.desc()).all()
