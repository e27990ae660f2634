from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from ..deps import get_db, require_operation
from ..models import EquipmentType
from ..policy import Operation
from ..schemas import ListEnvelope, EquipmentTypeOut

router = APIRouter()


@router.get("", response_model=ListEnvelope[EquipmentTypeOut])
async def list_equipment_types(
    db: AsyncSession = Depends(get_db),
    category: str | None = Query(None),
    current_user=Depends(require_operation(Operation.list_equipment_types)),
):
    stmt = select(EquipmentType)
    if category:
        stmt = stmt.where(EquipmentType.category == category)
    stmt = stmt.order_by(EquipmentType.category, EquipmentType.name)
    res = await db.execute(stmt)
    types = [EquipmentTypeOut.model_validate(item) for item in res.scalars().all()]
    return ListEnvelope(data=types, count=len(types))
