from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from ..deps import get_db, get_current_user
from ..models import User
from ..policy import Operation, resolve_scope
from ..schemas import ListEnvelope, AssetOut
from ..services import listings

router = APIRouter()


@router.get("", response_model=ListEnvelope[AssetOut])
async def list_assets(
    db: AsyncSession = Depends(get_db),
    base_id: int | None = Query(None),
    current_user: User = Depends(get_current_user),
):
    scope = resolve_scope(current_user, Operation.list_assets, base_id)
    rows = await listings.list_assets(db, scope)
    return ListEnvelope(data=rows, count=len(rows))
