import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..models import AuditLog


logger = logging.getLogger(__name__)


class AuditRecorder:
    """
    Appends audit entries in a session of its own, so a failed audit write
    can neither roll back nor poison the business transaction that
    triggered it. Failures are logged and swallowed.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self.sessionmaker = sessionmaker

    async def record(
        self,
        user_id: Optional[int],
        action: str,
        entity_type: str,
        entity_id: Optional[int],
        details: Optional[dict] = None,
    ) -> None:
        try:
            async with self.sessionmaker() as session:
                session.add(
                    AuditLog(
                        user_id=user_id,
                        action=action,
                        entity_type=entity_type,
                        entity_id=entity_id,
                        details=details,
                        timestamp=datetime.utcnow(),
                    )
                )
                await session.commit()
        except Exception:
            logger.exception(
                "Failed to create audit log: %s %s id=%s user=%s", action, entity_type, entity_id, user_id
            )
            return
        logger.info("Audit log: %s %s id=%s user=%s", action, entity_type, entity_id, user_id)
