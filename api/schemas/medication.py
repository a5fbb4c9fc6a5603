"""
Medication Schemas
Pydantic models for medication-related API requests and responses
"""

from typing import Optional, List
from datetime import datetime, date, time
from pydantic import BaseModel, Field, ConfigDict


# ==================== BASE SCHEMAS ====================

class MedicationBase(BaseModel):
    """Base medication schema"""
    name: str = Field(..., min_length=1, max_length=255)
    dosage: str = Field(..., min_length=1, max_length=100)
    frequency: str = Field(..., min_length=1, max_length=100)


# ==================== REQUEST SCHEMAS ====================

class MedicationCreate(MedicationBase):
    """Schema for creating a new medication"""
    patient_id: int
    instructions: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    current_supply: Optional[int] = Field(None, ge=0)
    refill_threshold: Optional[int] = Field(None, ge=0)


class MedicationUpdate(BaseModel):
    """Schema for a partial medication update"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    dosage: Optional[str] = Field(None, min_length=1, max_length=100)
    frequency: Optional[str] = Field(None, min_length=1, max_length=100)
    instructions: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: Optional[bool] = None
    current_supply: Optional[int] = Field(None, ge=0)
    refill_threshold: Optional[int] = Field(None, ge=0)


class ScheduleSlotCreate(BaseModel):
    """Schema for adding a reminder slot"""
    scheduled_time: str = Field(..., description="Time of day, HH:MM")
    days_of_week: Optional[List[int]] = Field(
        None, description="Weekday indices, 0 = Sunday; omit for every day"
    )


# ==================== RESPONSE SCHEMAS ====================

class MedicationResponse(MedicationBase):
    """Schema for medication response"""
    id: int
    patient_id: int
    instructions: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    is_active: bool = True
    current_supply: Optional[int] = None
    refill_threshold: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MedicationList(BaseModel):
    """List of medications"""
    medications: List[MedicationResponse]
    total: int
    active_count: int


class ScheduleSlotResponse(BaseModel):
    """Schema for a reminder slot"""
    id: int
    medication_id: int
    scheduled_time: time
    days_of_week: Optional[List[int]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
