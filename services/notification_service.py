"""
Notification Service
Stored notification inbox for patients and caregivers
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc

import models
from config import settings
from services.base import BaseService


logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    """
    Service for reading and acknowledging stored notifications
    """

    async def get_notifications(
        self,
        user_id: int,
        limit: Optional[int] = None,
        db: Optional[Session] = None
    ) -> List[models.Notification]:
        """Newest notifications for a user"""
        limit = limit or settings.NOTIFICATION_PAGE_LIMIT

        def _get(session: Session) -> List[models.Notification]:
            return session.query(models.Notification).filter(
                models.Notification.user_id == user_id
            ).order_by(
                desc(models.Notification.sent_at),
                desc(models.Notification.id)
            ).limit(limit).all()

        return self._run(_get, db)

    async def get_unread_count(
        self,
        user_id: int,
        db: Optional[Session] = None
    ) -> int:
        def _count(session: Session) -> int:
            return session.query(models.Notification).filter(
                models.Notification.user_id == user_id,
                models.Notification.read_at.is_(None)
            ).count()

        return self._run(_count, db)

    async def mark_as_read(
        self,
        notification_id: int,
        user_id: int,
        db: Optional[Session] = None
    ) -> bool:
        """
        Set read_at on the user's own notification.
        Returns False when no such notification belongs to the user.
        An already read notification keeps its original read_at.
        """
        def _mark(session: Session) -> bool:
            notification = session.query(models.Notification).filter(
                models.Notification.id == notification_id,
                models.Notification.user_id == user_id
            ).first()
            if not notification:
                return False

            if notification.read_at is None:
                notification.read_at = self.clock()
                session.commit()
            return True

        return self._run(_mark, db)


# Singleton instance
notification_service = NotificationService()
