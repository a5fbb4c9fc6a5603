"""
Notifications API Router
Endpoints for SOS alerts and the notification inbox
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.notification import (
    SOSRequest,
    SOSResponse,
    NotificationResponse,
    NotificationList,
)


router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/sos", response_model=SOSResponse)
async def send_sos_alert(
    sos_data: SOSRequest,
    patient_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Alert every caregiver linked to the calling patient

    Individual delivery failures are reported in the counts; the request
    itself only fails when the patient or caregivers cannot be read.
    """
    alert_service = services.get_alert_service()

    result = await alert_service.send_sos_alert(
        patient_id,
        latitude=sos_data.latitude,
        longitude=sos_data.longitude,
        db=db
    )

    return SOSResponse(
        attempted=result.attempted,
        delivered=result.delivered,
        failed=result.failed,
        skipped=result.skipped,
        unpersisted=result.unpersisted
    )


@router.get("", response_model=NotificationList)
async def get_notifications(
    limit: Optional[int] = Query(None, ge=1, le=100),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get the calling user's newest notifications
    """
    notification_service = services.get_notification_service()

    notifications = await notification_service.get_notifications(user_id, limit=limit, db=db)
    unread = await notification_service.get_unread_count(user_id, db=db)

    return NotificationList(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        total=len(notifications),
        unread_count=unread
    )


@router.post("/{notification_id}/read")
async def mark_notification_read(
    notification_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Mark one of the calling user's notifications as read
    """
    notification_service = services.get_notification_service()

    marked = await notification_service.mark_as_read(notification_id, user_id, db=db)
    if not marked:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification {notification_id} not found"
        )

    return {"success": True, "notification_id": notification_id}
