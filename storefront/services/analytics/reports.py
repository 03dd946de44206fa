from collections import OrderedDict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from storefront import models

PERIODS = ("today", "week", "month", "all")

PAYMENT_LABELS = {"pix": "PIX", "cartao": "Cartão", "dinheiro": "Dinheiro"}
DELIVERY_LABELS = {"delivery": "Entrega", "pickup": "Retirada"}

COMPLETED = {"completed", "delivered"}


def _in_period(created_at: datetime, period: str, now: datetime) -> bool:
    if period == "today":
        return created_at.date() == now.date()
    if period == "week":
        return created_at >= now - timedelta(days=7)
    if period == "month":
        return created_at.year == now.year and created_at.month == now.month
    return True


def sales_summary(db: Session, period: str = "week", now: Optional[datetime] = None) -> dict:
    if period not in PERIODS:
        raise ValueError(f"Period must be one of: {', '.join(PERIODS)}")
    now = now or datetime.utcnow()

    orders = [
        o for o in db.query(models.Order).order_by(models.Order.created_at).all()
        if _in_period(o.created_at, period, now)
    ]
    completed = [o for o in orders if o.status in COMPLETED]
    cancelled = [o for o in orders if o.status == "cancelled"]
    active = [o for o in orders if o.status not in COMPLETED and o.status != "cancelled"]

    revenue = sum((Decimal(str(o.total)) for o in completed), Decimal("0"))
    items_sold = sum(o.item_count for o in completed)
    avg_ticket = (revenue / len(completed)) if completed else Decimal("0")

    by_payment: "OrderedDict[str, Decimal]" = OrderedDict()
    for o in completed:
        label = PAYMENT_LABELS.get(o.payment_method, o.payment_method or "Outro")
        by_payment[label] = by_payment.get(label, Decimal("0")) + Decimal(str(o.total))

    by_delivery: "OrderedDict[str, int]" = OrderedDict()
    for o in orders:
        label = DELIVERY_LABELS.get(o.delivery_type, "Retirada")
        by_delivery[label] = by_delivery.get(label, 0) + 1

    by_day: "OrderedDict[str, Decimal]" = OrderedDict()
    for o in completed:
        key = o.created_at.strftime("%d/%m")
        by_day[key] = by_day.get(key, Decimal("0")) + Decimal(str(o.total))
    days = list(by_day.items())[-14:]

    statuses = [
        ("Ativos", len(active)),
        ("Finalizados", len(completed)),
        ("Cancelados", len(cancelled)),
    ]

    return {
        "period": period,
        "total_orders": len(orders),
        "active_orders": len(active),
        "completed_orders": len(completed),
        "cancelled_orders": len(cancelled),
        "revenue": float(revenue),
        "items_sold": items_sold,
        "average_ticket": round(float(avg_ticket), 2),
        "revenue_by_payment": [{"name": k, "value": float(v)} for k, v in by_payment.items()],
        "orders_by_delivery_type": [{"name": k, "value": v} for k, v in by_delivery.items()],
        "revenue_by_day": [{"day": k, "total": float(v)} for k, v in days],
        "status_breakdown": [{"name": k, "value": v} for k, v in statuses if v > 0],
    }
