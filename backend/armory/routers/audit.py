from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from ..config import get_settings
from ..deps import get_db, require_operation
from ..policy import Operation
from ..schemas import ListEnvelope, AuditEntry
from ..services import listings


router = APIRouter()
settings = get_settings()


@router.get("", response_model=ListEnvelope[AuditEntry])
async def list_audit(
    db: AsyncSession = Depends(get_db),
    limit: int = Query(100, ge=1),
    offset: int = Query(0, ge=0),
    entity_type: str | None = Query(None),
    current_user=Depends(require_operation(Operation.list_audit_logs)),
):
    rows = await listings.list_audit_logs(db, min(limit, settings.audit_page_max), offset, entity_type)
    return ListEnvelope(data=rows, count=len(rows))
