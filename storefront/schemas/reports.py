from typing import List
from pydantic import BaseModel


class NamedValue(BaseModel):
    name: str
    value: float


class DailyRevenue(BaseModel):
    day: str  # dd/mm
    total: float


class SalesSummary(BaseModel):
    period: str
    total_orders: int
    active_orders: int
    completed_orders: int
    cancelled_orders: int
    revenue: float
    items_sold: int
    average_ticket: float
    revenue_by_payment: List[NamedValue] = []
    orders_by_delivery_type: List[NamedValue] = []
    revenue_by_day: List[DailyRevenue] = []
    status_breakdown: List[NamedValue] = []
