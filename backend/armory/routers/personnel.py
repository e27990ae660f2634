from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from ..deps import get_db, get_current_user
from ..models import User
from ..policy import Operation, resolve_scope
from ..schemas import ListEnvelope, PersonnelOut
from ..services import listings

router = APIRouter()


@router.get("", response_model=ListEnvelope[PersonnelOut])
async def list_personnel(
    db: AsyncSession = Depends(get_db),
    base_id: int | None = Query(None),
    current_user: User = Depends(get_current_user),
):
    scope = resolve_scope(current_user, Operation.list_personnel, base_id)
    rows = await listings.list_personnel(db, scope)
    return ListEnvelope(data=rows, count=len(rows))
