from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from ..deps import get_db, require_operation
from ..models import MilitaryBase
from ..policy import Operation
from ..schemas import ListEnvelope, BaseOut

router = APIRouter()


@router.get("", response_model=ListEnvelope[BaseOut])
async def list_bases(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_operation(Operation.list_bases)),
):
    res = await db.execute(select(MilitaryBase).order_by(MilitaryBase.name))
    bases = [BaseOut.model_validate(base) for base in res.scalars().all()]
    return ListEnvelope(data=bases, count=len(bases))
