from datetime import date
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from ..deps import get_db, get_current_user, get_writer, parse_payload, require_operation
from ..filters import DateRange
from ..models import User
from ..policy import Operation, resolve_scope
from ..schemas import ListEnvelope, CreatedEnvelope, TransferCreate, TransferOut
from ..services import listings
from ..services.transactions import TransactionWriter

router = APIRouter()


@router.get("", response_model=ListEnvelope[TransferOut])
async def list_transfers(
    db: AsyncSession = Depends(get_db),
    base_id: int | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    current_user: User = Depends(get_current_user),
):
    scope = resolve_scope(current_user, Operation.list_transfers, base_id)
    rows = await listings.list_transfers(db, scope, DateRange(date_from, date_to))
    return ListEnvelope(data=rows, count=len(rows))


@router.post("", response_model=CreatedEnvelope[TransferOut], status_code=status.HTTP_201_CREATED)
async def create_transfer(
    request: Request,
    current_user: User = Depends(require_operation(Operation.create_transfer)),
    writer: TransactionWriter = Depends(get_writer),
):
    payload = await parse_payload(request, TransferCreate)
    transfer = await writer.create_transfer(current_user, payload)
    return CreatedEnvelope(message="Transfer record created successfully", data=TransferOut.model_validate(transfer))
