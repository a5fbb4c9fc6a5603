"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from typing import Optional
from fastapi import Depends, HTTPException, status, Header
from sqlalchemy.orm import Session

from database import get_db


async def get_current_user_id(
    x_user_id: Optional[int] = Header(None, alias="X-User-Id")
) -> int:
    """
    Acting user for the request.
    Identity is asserted by the upstream auth layer through this header.
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header required",
        )
    return x_user_id


async def ensure_patient_access(
    user_id: int,
    patient_id: int,
    db: Session
) -> None:
    """Raise 403 unless the user is the patient or a linked caregiver"""
    link_service = services.get_link_service()
    allowed = await link_service.can_access_patient_data(user_id, patient_id, db=db)
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"No access to patient {patient_id}",
        )


async def require_patient_access(
    patient_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
) -> int:
    """
    Path dependency for patient-scoped endpoints
    Returns the patient ID once access is confirmed
    """
    await ensure_patient_access(user_id, patient_id, db)
    return patient_id


async def require_medication_access(
    medication_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
) -> int:
    """Resolve the medication's patient and check access to it"""
    medication = await services.get_medication_service().get_medication(medication_id, db=db)
    await ensure_patient_access(user_id, medication.patient_id, db)
    return medication_id


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_schedule_service():
        from services.schedule_service import schedule_service
        return schedule_service

    @staticmethod
    def get_dose_service():
        from services.dose_service import dose_service
        return dose_service

    @staticmethod
    def get_alert_service():
        from services.alert_service import alert_service
        return alert_service

    @staticmethod
    def get_link_service():
        from services.link_service import link_service
        return link_service

    @staticmethod
    def get_medication_service():
        from services.medication_service import medication_service
        return medication_service

    @staticmethod
    def get_notification_service():
        from services.notification_service import notification_service
        return notification_service


# Service dependency instances
services = ServiceDependency()
