"""
Notification Schemas
Pydantic models for SOS alerts and the notification inbox
"""

from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


# ==================== REQUEST SCHEMAS ====================

class SOSRequest(BaseModel):
    """Schema for raising an SOS alert"""
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


# ==================== RESPONSE SCHEMAS ====================

class SOSResponse(BaseModel):
    """Fan-out outcome of an SOS alert"""
    success: bool = True
    attempted: int
    delivered: int
    failed: int
    skipped: int = 0
    unpersisted: int = 0


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    type: str
    title: str
    body: str
    data: Optional[Dict[str, Any]] = None
    sent_at: datetime
    read_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class NotificationList(BaseModel):
    notifications: List[NotificationResponse]
    total: int
    unread_count: int
