from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import or_, true
from sqlalchemy.sql import ColumnElement

from . import errors
from .policy import Scope, SingleBase


@dataclass(frozen=True)
class DateRange:
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    def __post_init__(self):
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise errors.ValidationError("date_from must not be after date_to", fields=["date_from", "date_to"])


def scope_clause(scope: Scope, *base_columns) -> ColumnElement[bool]:
    """
    Translate a Scope into a WHERE clause over one or more base columns.
    A single base matches when any of the columns equals it; the id is
    always a bound parameter.
    """
    if isinstance(scope, SingleBase):
        return or_(*(column == scope.base_id for column in base_columns))
    return true()


def date_clauses(period: Optional[DateRange], date_column) -> list[ColumnElement[bool]]:
    if period is None:
        return []
    clauses = []
    if period.date_from:
        clauses.append(date_column >= period.date_from)
    if period.date_to:
        clauses.append(date_column <= period.date_to)
    return clauses
