from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.core.security import CurrentUser, require_admin
from storefront.db.session import get_db
from storefront.schemas.reports import SalesSummary
from storefront.services.analytics.reports import PERIODS, sales_summary

router = APIRouter(prefix="/admin/reports", tags=["admin"])


@router.get("/summary", response_model=SalesSummary)
def summary(
    period: str = Query("week"),
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
):
    if period not in PERIODS:
        raise HTTPException(status_code=400, detail=f"Period must be one of: {', '.join(PERIODS)}")
    return sales_summary(db, period=period)
