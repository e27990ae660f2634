from datetime import date
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from ..deps import get_db, get_current_user, get_writer, parse_payload, require_operation
from ..filters import DateRange
from ..models import User
from ..policy import Operation, resolve_scope
from ..schemas import ListEnvelope, CreatedEnvelope, PurchaseCreate, PurchaseOut
from ..services import listings
from ..services.transactions import TransactionWriter

router = APIRouter()


@router.get("", response_model=ListEnvelope[PurchaseOut])
async def list_purchases(
    db: AsyncSession = Depends(get_db),
    base_id: int | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    current_user: User = Depends(get_current_user),
):
    scope = resolve_scope(current_user, Operation.list_purchases, base_id)
    rows = await listings.list_purchases(db, scope, DateRange(date_from, date_to))
    return ListEnvelope(data=rows, count=len(rows))


@router.post("", response_model=CreatedEnvelope[PurchaseOut], status_code=status.HTTP_201_CREATED)
async def create_purchase(
    request: Request,
    current_user: User = Depends(require_operation(Operation.create_purchase)),
    writer: TransactionWriter = Depends(get_writer),
):
    payload = await parse_payload(request, PurchaseCreate)
    purchase = await writer.create_purchase(current_user, payload)
    return CreatedEnvelope(message="Purchase record created successfully", data=PurchaseOut.model_validate(purchase))
