"""
Doses API Router
Endpoints for recording dose outcomes
"""

from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from api.deps import (
    get_db,
    get_current_user_id,
    ensure_patient_access,
    require_patient_access,
    services,
)
from api.schemas.dose import DoseLogCreate, DoseLogResponse, DoseHistory, DoseHistoryItem


router = APIRouter(prefix="/doses", tags=["doses"])


@router.post("", response_model=DoseLogResponse, status_code=status.HTTP_201_CREATED)
async def log_dose(
    dose_data: DoseLogCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Record a taken, missed or skipped dose

    - **status**: `taken` also decrements the medication's supply (never below zero)
    - A second log for the same slot and day is rejected with 409
    """
    medication = await services.get_medication_service().get_medication(
        dose_data.medication_id, db=db
    )
    await ensure_patient_access(user_id, medication.patient_id, db)

    dose_service = services.get_dose_service()
    return await dose_service.log_dose(
        medication_id=dose_data.medication_id,
        scheduled_datetime=dose_data.scheduled_datetime,
        status=dose_data.status,
        actual_datetime=dose_data.actual_datetime,
        schedule_id=dose_data.schedule_id,
        notes=dose_data.notes,
        db=db
    )


@router.get("/patient/{patient_id}/recent", response_model=DoseHistory)
async def get_recent_doses(
    patient_id: int = Depends(require_patient_access),
    limit: Optional[int] = Query(None, ge=1, le=200),
    db: Session = Depends(get_db)
):
    """
    Get a patient's most recent dose logs
    """
    dose_service = services.get_dose_service()

    logs = await dose_service.get_dose_logs(patient_id, limit=limit, db=db)

    return DoseHistory(
        patient_id=patient_id,
        logs=[DoseHistoryItem(**log) for log in logs],
        total=len(logs)
    )
