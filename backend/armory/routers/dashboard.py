from dataclasses import asdict
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from ..deps import get_db, get_current_user
from ..filters import DateRange
from ..models import User
from ..policy import Operation, resolve_scope
from ..schemas import DataEnvelope, DashboardMetrics
from ..services.balance import BalanceEngine
from ..services.ledger import LedgerQueries


router = APIRouter()


@router.get("/metrics", response_model=DataEnvelope[DashboardMetrics])
async def dashboard_metrics(
    db: AsyncSession = Depends(get_db),
    base_id: int | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    current_user: User = Depends(get_current_user),
):
    scope = resolve_scope(current_user, Operation.view_dashboard, base_id)
    metrics = await BalanceEngine(LedgerQueries(db)).compute(scope, DateRange(date_from, date_to))
    return DataEnvelope(data=DashboardMetrics(**asdict(metrics)))
