from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..filters import DateRange, scope_clause, date_clauses
from ..models import Asset, Purchase, Transfer, Assignment, AssignmentStatus, Expenditure
from ..policy import Scope


class LedgerQueries:
    """Aggregate reads feeding the dashboard. Every result is a non-negative int; no rows means 0."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _total(self, stmt) -> int:
        res = await self.db.execute(stmt)
        return int(res.scalar_one() or 0)

    async def sum_assets(self, scope: Scope) -> int:
        stmt = select(func.coalesce(func.sum(Asset.quantity), 0)).where(scope_clause(scope, Asset.base_id))
        return await self._total(stmt)

    async def sum_purchases(self, scope: Scope, period: Optional[DateRange] = None) -> int:
        stmt = select(func.coalesce(func.sum(Purchase.quantity), 0)).where(
            scope_clause(scope, Purchase.base_id),
            *date_clauses(period, Purchase.purchase_date),
        )
        return await self._total(stmt)

    async def sum_transfers_in(self, scope: Scope, period: Optional[DateRange] = None) -> int:
        stmt = select(func.coalesce(func.sum(Transfer.quantity), 0)).where(
            scope_clause(scope, Transfer.to_base_id),
            *date_clauses(period, Transfer.transfer_date),
        )
        return await self._total(stmt)

    async def sum_transfers_out(self, scope: Scope, period: Optional[DateRange] = None) -> int:
        stmt = select(func.coalesce(func.sum(Transfer.quantity), 0)).where(
            scope_clause(scope, Transfer.from_base_id),
            *date_clauses(period, Transfer.transfer_date),
        )
        return await self._total(stmt)

    async def count_active_assignments(self, scope: Scope, period: Optional[DateRange] = None) -> int:
        stmt = select(func.count(Assignment.id)).where(
            Assignment.status == AssignmentStatus.active,
            scope_clause(scope, Assignment.base_id),
            *date_clauses(period, Assignment.assignment_date),
        )
        return await self._total(stmt)

    async def sum_expenditures(self, scope: Scope, period: Optional[DateRange] = None) -> int:
        stmt = select(func.coalesce(func.sum(Expenditure.quantity), 0)).where(
            scope_clause(scope, Expenditure.base_id),
            *date_clauses(period, Expenditure.expenditure_date),
        )
        return await self._total(stmt)
