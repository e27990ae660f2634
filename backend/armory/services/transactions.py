import logging
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import errors
from ..db import Base
from ..models import (
    MilitaryBase,
    EquipmentType,
    Personnel,
    Purchase,
    Transfer,
    TransferStatus,
    Assignment,
    AssignmentStatus,
    Expenditure,
    User,
)
from ..policy import Operation, authorize, check_base_ownership
from ..schemas import PurchaseCreate, TransferCreate, AssignmentCreate, ExpenditureCreate
from .audit import AuditRecorder


logger = logging.getLogger(__name__)

# upper bound of the INTEGER quantity columns
MAX_QUANTITY = 2**31 - 1

REQUIRED_FIELDS: dict[Operation, tuple[str, ...]] = {
    Operation.create_purchase: ("base_id", "equipment_type_id", "quantity", "purchase_date"),
    Operation.create_transfer: ("from_base_id", "to_base_id", "equipment_type_id", "quantity", "transfer_date"),
    Operation.create_assignment: ("base_id", "equipment_type_id", "personnel_id", "assignment_date"),
    Operation.create_expenditure: ("base_id", "equipment_type_id", "quantity", "expenditure_date"),
}


def require_fields(operation: Operation, payload: BaseModel) -> None:
    required = REQUIRED_FIELDS[operation]
    missing = [name for name in required if getattr(payload, name) is None]
    if missing:
        raise errors.ValidationError(f"Required fields: {', '.join(required)}", fields=missing)


def require_positive_quantity(quantity: int) -> None:
    if quantity <= 0 or quantity > MAX_QUANTITY:
        raise errors.ValidationError(
            f"quantity must be a positive integer no greater than {MAX_QUANTITY}", fields=["quantity"]
        )


class TransactionWriter:
    """
    Creates purchases, transfers, assignments and expenditures.

    Checks run in a fixed order and the first failure wins: role gate,
    required fields, structural rules, base ownership, referenced
    rows. Nothing is written before all of them pass. Each stored record
    gets exactly one audit entry before the call returns.
    """

    def __init__(self, db: AsyncSession, audit: AuditRecorder):
        self.db = db
        self.audit = audit

    async def create_purchase(self, user: User, payload: PurchaseCreate) -> Purchase:
        authorize(user, Operation.create_purchase)
        require_fields(Operation.create_purchase, payload)
        require_positive_quantity(payload.quantity)
        if payload.cost is not None and payload.cost < 0:
            raise errors.ValidationError("cost must not be negative", fields=["cost"])
        check_base_ownership(user, Operation.create_purchase, payload.base_id)
        await self._ensure_exists(MilitaryBase, payload.base_id, "Base")
        await self._ensure_exists(EquipmentType, payload.equipment_type_id, "Equipment type")

        purchase = Purchase(**payload.model_dump(), created_by=user.id)
        await self._store(purchase)
        await self._audit(
            user,
            "PURCHASE",
            purchase.id,
            {
                "base_id": purchase.base_id,
                "equipment_type_id": purchase.equipment_type_id,
                "quantity": purchase.quantity,
                "cost": payload.cost,
            },
        )
        return purchase

    async def create_transfer(self, user: User, payload: TransferCreate) -> Transfer:
        authorize(user, Operation.create_transfer)
        require_fields(Operation.create_transfer, payload)
        if payload.from_base_id == payload.to_base_id:
            raise errors.ValidationError("Cannot transfer to the same base", fields=["from_base_id", "to_base_id"])
        require_positive_quantity(payload.quantity)
        check_base_ownership(user, Operation.create_transfer, payload.from_base_id, payload.to_base_id)
        await self._ensure_exists(MilitaryBase, payload.from_base_id, "Base")
        await self._ensure_exists(MilitaryBase, payload.to_base_id, "Base")
        await self._ensure_exists(EquipmentType, payload.equipment_type_id, "Equipment type")

        transfer = Transfer(**payload.model_dump(), status=TransferStatus.pending, created_by=user.id)
        await self._store(transfer)
        await self._audit(
            user,
            "TRANSFER",
            transfer.id,
            {
                "from_base_id": transfer.from_base_id,
                "to_base_id": transfer.to_base_id,
                "equipment_type_id": transfer.equipment_type_id,
                "quantity": transfer.quantity,
            },
        )
        return transfer

    async def create_assignment(self, user: User, payload: AssignmentCreate) -> Assignment:
        authorize(user, Operation.create_assignment)
        require_fields(Operation.create_assignment, payload)
        check_base_ownership(user, Operation.create_assignment, payload.base_id)
        await self._ensure_exists(MilitaryBase, payload.base_id, "Base")
        await self._ensure_exists(EquipmentType, payload.equipment_type_id, "Equipment type")
        await self._ensure_exists(Personnel, payload.personnel_id, "Personnel")

        assignment = Assignment(**payload.model_dump(), status=AssignmentStatus.active, created_by=user.id)
        await self._store(assignment)
        await self._audit(
            user,
            "ASSIGNMENT",
            assignment.id,
            {
                "base_id": assignment.base_id,
                "equipment_type_id": assignment.equipment_type_id,
                "personnel_id": assignment.personnel_id,
                "serial_number": assignment.serial_number,
            },
        )
        return assignment

    async def create_expenditure(self, user: User, payload: ExpenditureCreate) -> Expenditure:
        authorize(user, Operation.create_expenditure)
        require_fields(Operation.create_expenditure, payload)
        require_positive_quantity(payload.quantity)
        check_base_ownership(user, Operation.create_expenditure, payload.base_id)
        await self._ensure_exists(MilitaryBase, payload.base_id, "Base")
        await self._ensure_exists(EquipmentType, payload.equipment_type_id, "Equipment type")

        expenditure = Expenditure(**payload.model_dump(), created_by=user.id)
        await self._store(expenditure)
        await self._audit(
            user,
            "EXPENDITURE",
            expenditure.id,
            {
                "base_id": expenditure.base_id,
                "equipment_type_id": expenditure.equipment_type_id,
                "quantity": expenditure.quantity,
                "reason": expenditure.reason,
            },
        )
        return expenditure

    async def _ensure_exists(self, model: type[Base], entity_id: int, label: str) -> None:
        res = await self.db.execute(select(model.id).where(model.id == entity_id))
        if res.scalar_one_or_none() is None:
            raise errors.NotFound(f"{label} {entity_id} not found")

    async def _store(self, record: Base) -> None:
        self.db.add(record)
        await self.db.commit()
        await self.db.refresh(record)

    async def _audit(self, user: User, entity_type: str, entity_id: int, details: Optional[dict]) -> None:
        await self.audit.record(user.id, "CREATE", entity_type, entity_id, details)
        logger.info("New %s created: ID %s by user %s", entity_type.lower(), entity_id, user.email)
