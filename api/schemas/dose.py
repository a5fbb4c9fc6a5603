"""
Dose Schemas
Pydantic models for dose logging API requests and responses
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel, Field, ConfigDict

from models import DoseStatus


# ==================== REQUEST SCHEMAS ====================

class DoseLogCreate(BaseModel):
    """Schema for recording a dose outcome"""
    medication_id: int
    schedule_id: Optional[int] = None
    scheduled_datetime: str = Field(..., description="ISO-8601 scheduled time")
    actual_datetime: Optional[str] = None
    status: str = Field(..., description="taken, missed or skipped")
    notes: Optional[str] = Field(None, max_length=1000)


# ==================== RESPONSE SCHEMAS ====================

class DoseLogResponse(BaseModel):
    """Schema for a stored dose log"""
    id: int
    medication_id: int
    schedule_id: Optional[int] = None
    scheduled_datetime: datetime
    scheduled_date: date
    actual_datetime: Optional[datetime] = None
    status: DoseStatus
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DoseHistoryItem(BaseModel):
    """One entry of a patient's recent dose history"""
    id: int
    medication_id: int
    medication_name: str
    schedule_id: Optional[int] = None
    scheduled_datetime: datetime
    actual_datetime: Optional[datetime] = None
    status: str
    notes: Optional[str] = None


class DoseHistory(BaseModel):
    """Recent dose history"""
    patient_id: int
    logs: List[DoseHistoryItem]
    total: int
