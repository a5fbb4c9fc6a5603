"""
Links API Router
Endpoints for the patient/caregiver link registry
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.link import LinkCreate, LinkResponse, LinkedPatient, LinkedPatientList


router = APIRouter(prefix="/links", tags=["links"])


@router.post("", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
async def create_link(
    link_data: LinkCreate,
    caregiver_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Link the calling caregiver to a patient by the patient's email

    Linking an already linked pair returns the existing link.
    """
    link_service = services.get_link_service()
    return await link_service.create_link(link_data.patient_email, caregiver_id, db=db)


@router.get("/caregiver/{caregiver_id}/patients", response_model=LinkedPatientList)
async def list_linked_patients(
    caregiver_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    List the patients a caregiver is linked to
    """
    if user_id != caregiver_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Caregivers can only list their own patients"
        )

    link_service = services.get_link_service()
    patients = await link_service.list_linked_patients(caregiver_id, db=db)

    return LinkedPatientList(
        caregiver_id=caregiver_id,
        patients=[LinkedPatient.model_validate(p) for p in patients],
        total=len(patients)
    )
