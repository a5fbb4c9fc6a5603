"""
Schedules API Router
Endpoints for the daily dose projection
"""

from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_db, require_patient_access, services
from api.schemas.schedule import DoseOccurrenceResponse, TodaySchedule
from services.schedule_service import OccurrenceState


router = APIRouter(prefix="/patients", tags=["schedules"])


@router.get("/{patient_id}/schedule/today", response_model=TodaySchedule)
async def get_today_schedule(
    patient_id: int = Depends(require_patient_access),
    on_date: Optional[date] = Query(None, alias="date", description="Day to project (default: today in the patient's timezone)"),
    db: Session = Depends(get_db)
):
    """
    Get a patient's doses for one day

    Each dose is `upcoming` until a taken, missed or skipped log exists for
    its slot on that day.
    """
    schedule_service = services.get_schedule_service()

    target = on_date or await schedule_service.get_patient_today(patient_id, db=db)
    occurrences = await schedule_service.get_today_schedule(
        patient_id,
        reference_date=target,
        db=db
    )

    return TodaySchedule(
        patient_id=patient_id,
        date=target,
        doses=[DoseOccurrenceResponse(**o.to_dict()) for o in occurrences],
        total=len(occurrences),
        remaining=sum(1 for o in occurrences if o.state == OccurrenceState.UPCOMING)
    )
