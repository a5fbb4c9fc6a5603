"""
Medications API Router
Endpoints for medication management
"""

from typing import List
from fastapi import APIRouter, Depends, status, Query, Response
from sqlalchemy.orm import Session

from api.deps import (
    get_db,
    get_current_user_id,
    ensure_patient_access,
    require_patient_access,
    require_medication_access,
    services,
)
from api.schemas.medication import (
    MedicationCreate,
    MedicationUpdate,
    MedicationResponse,
    MedicationList,
    ScheduleSlotCreate,
    ScheduleSlotResponse,
)


router = APIRouter(prefix="/medications", tags=["medications"])


@router.post("", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def create_medication(
    medication_data: MedicationCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Add a new medication for a patient

    - **patient_id**: Patient ID
    - **name**: Medication name
    - **dosage**: Dosage (e.g., "10mg")
    - **frequency**: Frequency description
    """
    await ensure_patient_access(user_id, medication_data.patient_id, db)
    medication_service = services.get_medication_service()

    return await medication_service.create_medication(
        patient_id=medication_data.patient_id,
        name=medication_data.name,
        dosage=medication_data.dosage,
        frequency=medication_data.frequency,
        instructions=medication_data.instructions,
        start_date=medication_data.start_date,
        end_date=medication_data.end_date,
        current_supply=medication_data.current_supply,
        refill_threshold=medication_data.refill_threshold,
        db=db
    )


@router.get("/patient/{patient_id}", response_model=MedicationList)
async def get_patient_medications(
    patient_id: int = Depends(require_patient_access),
    active_only: bool = Query(False, description="Only return active medications"),
    db: Session = Depends(get_db)
):
    """
    Get all medications for a patient
    """
    medication_service = services.get_medication_service()

    medications = await medication_service.get_patient_medications(
        patient_id,
        active_only=active_only,
        db=db
    )

    return MedicationList(
        medications=[MedicationResponse.model_validate(m) for m in medications],
        total=len(medications),
        active_count=sum(1 for m in medications if m.is_active)
    )


@router.get("/patient/{patient_id}/low-supply", response_model=List[MedicationResponse])
async def get_low_supply_medications(
    patient_id: int = Depends(require_patient_access),
    db: Session = Depends(get_db)
):
    """
    Active medications at or below their refill threshold
    """
    medication_service = services.get_medication_service()
    return await medication_service.get_low_supply_medications(patient_id, db=db)


@router.patch("/{medication_id}", response_model=MedicationResponse)
async def update_medication(
    medication_data: MedicationUpdate,
    medication_id: int = Depends(require_medication_access),
    db: Session = Depends(get_db)
):
    """
    Update medication fields; omitted fields are left unchanged
    """
    medication_service = services.get_medication_service()

    updates = medication_data.model_dump(exclude_unset=True)

    if not updates:
        return await medication_service.get_medication(medication_id, db=db)

    return await medication_service.update_medication(medication_id, updates, db=db)


@router.post("/{medication_id}/deactivate", response_model=MedicationResponse)
async def deactivate_medication(
    medication_id: int = Depends(require_medication_access),
    db: Session = Depends(get_db)
):
    """
    Deactivate a medication; its slots no longer appear in daily schedules
    """
    medication_service = services.get_medication_service()
    return await medication_service.deactivate_medication(medication_id, db=db)


@router.delete("/{medication_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_medication(
    medication_id: int = Depends(require_medication_access),
    db: Session = Depends(get_db)
):
    """
    Delete a medication together with its slots and dose logs
    """
    medication_service = services.get_medication_service()
    await medication_service.delete_medication(medication_id, db=db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{medication_id}/schedule", response_model=List[ScheduleSlotResponse])
async def get_medication_slots(
    medication_id: int = Depends(require_medication_access),
    db: Session = Depends(get_db)
):
    """
    List a medication's reminder slots
    """
    schedule_service = services.get_schedule_service()
    return await schedule_service.get_medication_slots(medication_id, db=db)


@router.post(
    "/{medication_id}/schedule",
    response_model=ScheduleSlotResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_schedule_slot(
    slot_data: ScheduleSlotCreate,
    medication_id: int = Depends(require_medication_access),
    db: Session = Depends(get_db)
):
    """
    Add a recurring reminder slot

    - **scheduled_time**: "HH:MM"
    - **days_of_week**: 0 = Sunday through 6 = Saturday; omit for every day
    """
    medication_service = services.get_medication_service()

    return await medication_service.add_schedule_slot(
        medication_id,
        slot_data.scheduled_time,
        days_of_week=slot_data.days_of_week,
        db=db
    )
