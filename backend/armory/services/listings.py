"""Scoped read models behind the list endpoints, joined with display names."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from ..filters import DateRange, scope_clause, date_clauses
from ..models import (
    MilitaryBase,
    EquipmentType,
    Personnel,
    User,
    Asset,
    Purchase,
    Transfer,
    Assignment,
    Expenditure,
    AuditLog,
)
from ..policy import Scope


def _columns(model) -> list:
    return list(model.__table__.columns)


async def _rows(db: AsyncSession, stmt) -> list[dict]:
    res = await db.execute(stmt)
    return [dict(row) for row in res.mappings().all()]


async def list_purchases(db: AsyncSession, scope: Scope, period: Optional[DateRange] = None) -> list[dict]:
    stmt = (
        select(
            *_columns(Purchase),
            MilitaryBase.name.label("base_name"),
            EquipmentType.name.label("equipment_name"),
            EquipmentType.category.label("equipment_category"),
            User.name.label("created_by_name"),
        )
        .join(MilitaryBase, Purchase.base_id == MilitaryBase.id)
        .join(EquipmentType, Purchase.equipment_type_id == EquipmentType.id)
        .outerjoin(User, Purchase.created_by == User.id)
        .where(scope_clause(scope, Purchase.base_id), *date_clauses(period, Purchase.purchase_date))
        .order_by(Purchase.purchase_date.desc(), Purchase.created_at.desc())
    )
    return await _rows(db, stmt)


async def list_transfers(db: AsyncSession, scope: Scope, period: Optional[DateRange] = None) -> list[dict]:
    from_base = aliased(MilitaryBase)
    to_base = aliased(MilitaryBase)
    stmt = (
        select(
            *_columns(Transfer),
            from_base.name.label("from_base_name"),
            to_base.name.label("to_base_name"),
            EquipmentType.name.label("equipment_name"),
            EquipmentType.category.label("equipment_category"),
            User.name.label("created_by_name"),
        )
        .join(from_base, Transfer.from_base_id == from_base.id)
        .join(to_base, Transfer.to_base_id == to_base.id)
        .join(EquipmentType, Transfer.equipment_type_id == EquipmentType.id)
        .outerjoin(User, Transfer.created_by == User.id)
        # a base sees transfers leaving it and arriving at it
        .where(
            scope_clause(scope, Transfer.from_base_id, Transfer.to_base_id),
            *date_clauses(period, Transfer.transfer_date),
        )
        .order_by(Transfer.transfer_date.desc(), Transfer.created_at.desc())
    )
    return await _rows(db, stmt)


async def list_assignments(db: AsyncSession, scope: Scope, period: Optional[DateRange] = None) -> list[dict]:
    stmt = (
        select(
            *_columns(Assignment),
            MilitaryBase.name.label("base_name"),
            EquipmentType.name.label("equipment_name"),
            EquipmentType.category.label("equipment_category"),
            Personnel.name.label("personnel_name"),
            Personnel.rank.label("personnel_rank"),
            Personnel.unit.label("personnel_unit"),
            User.name.label("created_by_name"),
        )
        .join(MilitaryBase, Assignment.base_id == MilitaryBase.id)
        .join(EquipmentType, Assignment.equipment_type_id == EquipmentType.id)
        .join(Personnel, Assignment.personnel_id == Personnel.id)
        .outerjoin(User, Assignment.created_by == User.id)
        .where(scope_clause(scope, Assignment.base_id), *date_clauses(period, Assignment.assignment_date))
        .order_by(Assignment.assignment_date.desc(), Assignment.created_at.desc())
    )
    return await _rows(db, stmt)


async def list_expenditures(db: AsyncSession, scope: Scope, period: Optional[DateRange] = None) -> list[dict]:
    stmt = (
        select(
            *_columns(Expenditure),
            MilitaryBase.name.label("base_name"),
            EquipmentType.name.label("equipment_name"),
            EquipmentType.category.label("equipment_category"),
            User.name.label("created_by_name"),
        )
        .join(MilitaryBase, Expenditure.base_id == MilitaryBase.id)
        .join(EquipmentType, Expenditure.equipment_type_id == EquipmentType.id)
        .outerjoin(User, Expenditure.created_by == User.id)
        .where(scope_clause(scope, Expenditure.base_id), *date_clauses(period, Expenditure.expenditure_date))
        .order_by(Expenditure.expenditure_date.desc(), Expenditure.created_at.desc())
    )
    return await _rows(db, stmt)


async def list_assets(db: AsyncSession, scope: Scope) -> list[dict]:
    stmt = (
        select(
            *_columns(Asset),
            MilitaryBase.name.label("base_name"),
            EquipmentType.name.label("equipment_name"),
            EquipmentType.category.label("equipment_category"),
        )
        .join(MilitaryBase, Asset.base_id == MilitaryBase.id)
        .join(EquipmentType, Asset.equipment_type_id == EquipmentType.id)
        .where(scope_clause(scope, Asset.base_id))
        .order_by(MilitaryBase.name, EquipmentType.category, EquipmentType.name)
    )
    return await _rows(db, stmt)


async def list_personnel(db: AsyncSession, scope: Scope) -> list[dict]:
    stmt = (
        select(*_columns(Personnel), MilitaryBase.name.label("base_name"))
        .outerjoin(MilitaryBase, Personnel.base_id == MilitaryBase.id)
        .where(scope_clause(scope, Personnel.base_id))
        .order_by(Personnel.name)
    )
    return await _rows(db, stmt)


async def list_audit_logs(
    db: AsyncSession, limit: int, offset: int, entity_type: Optional[str] = None
) -> list[dict]:
    stmt = (
        select(
            *_columns(AuditLog),
            User.name.label("user_name"),
            User.email.label("user_email"),
            User.role.label("user_role"),
        )
        # the acting user may have been removed since
        .outerjoin(User, AuditLog.user_id == User.id)
    )
    if entity_type:
        stmt = stmt.where(AuditLog.entity_type == entity_type.upper())
    stmt = stmt.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).offset(offset)
    return await _rows(db, stmt)
