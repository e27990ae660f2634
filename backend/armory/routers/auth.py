import logging
from datetime import datetime, timedelta
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .. import errors
from ..models import User
from ..schemas import LoginRequest, LoginResponse, UserBase
from ..security import verify_password, create_access_token
from ..config import get_settings
from ..deps import get_db, get_audit, get_current_user, parse_payload
from ..services.audit import AuditRecorder
from ..rate_limit import limiter


router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(f"{settings.rate_limit_login_per_min}/minute")
async def login(
    request: Request,
    db: AsyncSession = Depends(get_db),
    audit: AuditRecorder = Depends(get_audit),
):
    payload = await parse_payload(request, LoginRequest)
    email = (payload.email or "").strip()
    password = payload.password or ""
    if not email or not password:
        missing = [name for name, value in (("email", email), ("password", password)) if not value]
        raise errors.ValidationError("Email and password are required", fields=missing)
    result = await db.execute(select(User).where(User.email == email, User.is_active == True))
    user = result.scalar_one_or_none()
    if not user:
        logger.warning("Failed login attempt for email: %s", email)
        raise errors.Unauthorized("Invalid email or password")
    if not verify_password(password, user.password_hash):
        logger.warning("Invalid password attempt for user: %s", email)
        raise errors.Unauthorized("Invalid email or password")

    expires = timedelta(hours=settings.jwt_expire_hours)
    token = create_access_token(user, expires)
    user.last_login = datetime.utcnow()
    await db.commit()
    await audit.record(user.id, "LOGIN", "USER", user.id, {"email": user.email})
    logger.info("Successful login: %s", email)
    return LoginResponse(
        token=token,
        expires_in=int(expires.total_seconds()),
        user=UserBase.model_validate(user),
    )


@router.get("/me", response_model=UserBase)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
