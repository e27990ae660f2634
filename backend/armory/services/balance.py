from dataclasses import dataclass
from typing import Optional

from ..filters import DateRange
from ..policy import Scope
from .ledger import LedgerQueries


@dataclass(frozen=True)
class Metrics:
    opening_balance: int
    purchases: int
    transfer_in: int
    transfer_out: int
    assigned: int
    expended: int
    net_movement: int
    closing_balance: int


def compute_metrics(
    opening_balance: int,
    purchases: int,
    transfer_in: int,
    transfer_out: int,
    assigned: int,
    expended: int,
) -> Metrics:
    # assigned and expended are reported, they do not move the balance
    net_movement = purchases + transfer_in - transfer_out
    return Metrics(
        opening_balance=opening_balance,
        purchases=purchases,
        transfer_in=transfer_in,
        transfer_out=transfer_out,
        assigned=assigned,
        expended=expended,
        net_movement=net_movement,
        closing_balance=opening_balance + net_movement,
    )


class BalanceEngine:
    """
    Dashboard figures for a scope.

    The opening balance is the current Asset snapshot, not a value
    reconstructed for the start of ``period``; the date range only narrows
    the transaction streams.
    """

    def __init__(self, queries: LedgerQueries):
        self.queries = queries

    async def compute(self, scope: Scope, period: Optional[DateRange] = None) -> Metrics:
        return compute_metrics(
            opening_balance=await self.queries.sum_assets(scope),
            purchases=await self.queries.sum_purchases(scope, period),
            transfer_in=await self.queries.sum_transfers_in(scope, period),
            transfer_out=await self.queries.sum_transfers_out(scope, period),
            assigned=await self.queries.count_active_assignments(scope, period),
            expended=await self.queries.sum_expenditures(scope, period),
        )
