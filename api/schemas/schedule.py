"""
Schedule Schemas
Pydantic models for the daily dose projection
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel


class DoseOccurrenceResponse(BaseModel):
    """One projected dose for the day"""
    medication_id: int
    medication_name: str
    dosage: str
    schedule_id: int
    scheduled_time: str
    state: str
    dose_log_id: Optional[int] = None
    actual_datetime: Optional[datetime] = None


class TodaySchedule(BaseModel):
    """A patient's projected doses for one day"""
    patient_id: int
    date: date
    doses: List[DoseOccurrenceResponse]
    total: int
    remaining: int
