"""
Tests for Notification Service
Tests the stored notification inbox
"""

import pytest
from datetime import datetime, timedelta

from models import Notification
from tests import FROZEN_NOW


@pytest.fixture
def inbox(db_session, test_caregiver):
    """Five SOS notifications for the caregiver, one already read"""
    base = datetime(2024, 3, 5, 12, 0)
    rows = []
    for i in range(5):
        row = Notification(
            user_id=test_caregiver.id,
            type="sos",
            title="SOS from Maria Lopez",
            body="EMERGENCY! Maria Lopez needs help. Location not available",
            data={"patient_id": 1},
            sent_at=base + timedelta(minutes=i),
            read_at=base if i == 0 else None
        )
        db_session.add(row)
        rows.append(row)
    db_session.commit()
    return rows


class TestGetNotifications:
    """Tests for listing notifications"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_newest_first(self, notification_service, db_session, test_caregiver, inbox):
        notifications = await notification_service.get_notifications(test_caregiver.id, db=db_session)

        assert [n.id for n in notifications] == [row.id for row in reversed(inbox)]

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_limit(self, notification_service, db_session, test_caregiver, inbox):
        notifications = await notification_service.get_notifications(test_caregiver.id, limit=2, db=db_session)

        assert [n.id for n in notifications] == [inbox[4].id, inbox[3].id]

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_unread_count(self, notification_service, db_session, test_caregiver, inbox):
        assert await notification_service.get_unread_count(test_caregiver.id, db=db_session) == 4


class TestMarkAsRead:
    """Tests for acknowledging notifications"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_mark_as_read(self, notification_service, db_session, test_caregiver, inbox):
        assert await notification_service.mark_as_read(inbox[2].id, test_caregiver.id, db=db_session)

        db_session.refresh(inbox[2])
        assert inbox[2].read_at == FROZEN_NOW
        assert await notification_service.get_unread_count(test_caregiver.id, db=db_session) == 3

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_already_read_keeps_timestamp(self, notification_service, db_session, test_caregiver, inbox):
        assert await notification_service.mark_as_read(inbox[0].id, test_caregiver.id, db=db_session)

        db_session.refresh(inbox[0])
        assert inbox[0].read_at == datetime(2024, 3, 5, 12, 0)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_other_users_notification(self, notification_service, db_session, test_patient, inbox):
        assert not await notification_service.mark_as_read(inbox[1].id, test_patient.id, db=db_session)

        db_session.refresh(inbox[1])
        assert inbox[1].read_at is None
