"""
Database Models
SQLAlchemy ORM models for DoseKeeper
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Date, Time, Enum, Index, UniqueConstraint, CheckConstraint, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum

from config import TableNames
from database import Base


# ==================== ENUMS ====================

class UserRole(str, PyEnum):
    """Account roles"""
    PATIENT = "patient"
    CAREGIVER = "caregiver"


class DoseStatus(str, PyEnum):
    """Persisted outcome of a scheduled dose"""
    TAKEN = "taken"
    MISSED = "missed"
    SKIPPED = "skipped"


class NotificationKind(str, PyEnum):
    """Notification types written by the engine"""
    SOS = "sos"
    REFILL = "refill"
    REMINDER = "reminder"


# ==================== MODELS ====================

class User(Base):
    """Patient or caregiver account"""
    __tablename__ = TableNames.USERS

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.PATIENT)
    timezone = Column(String(50), default="UTC")

    # Push delivery token registered by the mobile client
    push_token = Column(String(255))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    medications = relationship("Medication", back_populates="patient", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_caregiver(self) -> bool:
        return self.role == UserRole.CAREGIVER


class PatientCaregiver(Base):
    """Authorization and alert-targeting link between a patient and a caregiver"""
    __tablename__ = TableNames.PATIENT_CAREGIVERS

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    caregiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    patient = relationship("User", foreign_keys=[patient_id])
    caregiver = relationship("User", foreign_keys=[caregiver_id])

    __table_args__ = (
        UniqueConstraint("patient_id", "caregiver_id", name="uq_patient_caregiver"),
        Index("ix_patient_caregivers_caregiver", "caregiver_id"),
    )


class Medication(Base):
    """Medication prescribed to a patient"""
    __tablename__ = TableNames.MEDICATIONS

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    name = Column(String(255), nullable=False)
    dosage = Column(String(100), nullable=False)  # e.g., "10mg"
    frequency = Column(String(100), nullable=False)  # "once daily", "2x daily"
    instructions = Column(Text)

    # Active-date range
    start_date = Column(Date, nullable=False, default=lambda: datetime.utcnow().date())
    end_date = Column(Date)
    is_active = Column(Boolean, nullable=False, default=True)

    # Supply tracking
    current_supply = Column(Integer)
    refill_threshold = Column(Integer)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    patient = relationship("User", back_populates="medications")
    schedules = relationship("MedicationSchedule", back_populates="medication", cascade="all, delete-orphan", passive_deletes=True)
    dose_logs = relationship("DoseLog", back_populates="medication", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("current_supply IS NULL OR current_supply >= 0", name="ck_medications_supply_non_negative"),
        Index("ix_medications_patient_active", "patient_id", "is_active"),
    )

    @property
    def needs_refill(self) -> bool:
        if self.current_supply is None or self.refill_threshold is None:
            return False
        return self.current_supply <= self.refill_threshold


class MedicationSchedule(Base):
    """Recurring time-of-day slot attached to a medication"""
    __tablename__ = TableNames.MEDICATION_SCHEDULES

    id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id", ondelete="CASCADE"), nullable=False)

    scheduled_time = Column(Time, nullable=False)
    # Weekday indices, 0 = Sunday .. 6 = Saturday. Empty or NULL means every day.
    days_of_week = Column(JSON)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    medication = relationship("Medication", back_populates="schedules")

    __table_args__ = (
        Index("ix_medication_schedules_medication", "medication_id"),
    )


class DoseLog(Base):
    """A logged dose event; the only persisted adherence state"""
    __tablename__ = TableNames.DOSE_LOGS

    id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id", ondelete="CASCADE"), nullable=False)
    schedule_id = Column(Integer, ForeignKey("medication_schedules.id", ondelete="SET NULL"))

    # Timing
    scheduled_datetime = Column(DateTime, nullable=False)
    scheduled_date = Column(Date, nullable=False)  # calendar day of scheduled_datetime
    actual_datetime = Column(DateTime)

    status = Column(Enum(DoseStatus, name="dose_status"), nullable=False)
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    medication = relationship("Medication", back_populates="dose_logs")
    schedule = relationship("MedicationSchedule")

    __table_args__ = (
        UniqueConstraint("medication_id", "schedule_id", "scheduled_date", name="uq_dose_log_slot_day"),
        Index("ix_dose_logs_medication_date", "medication_id", "scheduled_date"),
    )


class Notification(Base):
    """Stored notification; the durable record of every alert sent to a user"""
    __tablename__ = TableNames.NOTIFICATIONS

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    data = Column(JSON)

    sent_at = Column(DateTime, default=datetime.utcnow)
    read_at = Column(DateTime)

    # Relationships
    user = relationship("User", back_populates="notifications")

    __table_args__ = (
        Index("ix_notifications_user_sent", "user_id", "sent_at"),
    )
