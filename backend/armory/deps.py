from typing import TypeVar

from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError as PayloadError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from . import errors
from .db import get_session
from .models import User
from .policy import Operation, authorize
from .security import decode_token
from .services.audit import AuditRecorder
from .services.transactions import TransactionWriter


M = TypeVar("M", bound=BaseModel)


async def get_db(session: AsyncSession = Depends(get_session)) -> AsyncSession:
    return session


def get_audit(request: Request) -> AuditRecorder:
    return AuditRecorder(request.app.state.db.sessionmaker)


def get_writer(
    db: AsyncSession = Depends(get_db), audit: AuditRecorder = Depends(get_audit)
) -> TransactionWriter:
    return TransactionWriter(db, audit)


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    token = None
    auth = request.headers.get("Authorization")
    if auth and auth.lower().startswith("bearer "):
        token = auth.split(" ", 1)[1].strip()
    if not token:
        raise errors.Unauthorized()
    payload = decode_token(token)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise errors.Unauthorized("Invalid token")
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        raise errors.Unauthorized("User inactive")
    return user


def require_operation(operation: Operation):
    async def _checker(current_user: User = Depends(get_current_user)) -> User:
        authorize(current_user, operation)
        return current_user

    return _checker


async def parse_payload(request: Request, model: type[M]) -> M:
    """Read the JSON body only after authentication and the role gate have passed."""
    try:
        data = await request.json()
    except ValueError:
        raise errors.ValidationError("Request body must be a JSON object")
    if not isinstance(data, dict):
        raise errors.ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(data)
    except PayloadError as exc:
        fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
        raise errors.ValidationError(f"Invalid value for: {', '.join(fields)}", fields=fields)
