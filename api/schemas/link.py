"""
Link Schemas
Pydantic models for patient/caregiver links
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class LinkCreate(BaseModel):
    """Schema for linking the calling caregiver to a patient"""
    patient_email: str = Field(..., min_length=3, max_length=255)


class LinkResponse(BaseModel):
    id: int
    patient_id: int
    caregiver_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LinkedPatient(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    timezone: str = "UTC"

    model_config = ConfigDict(from_attributes=True)


class LinkedPatientList(BaseModel):
    caregiver_id: int
    patients: List[LinkedPatient]
    total: int
