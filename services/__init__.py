"""
Services Module
Business logic layer for the DoseKeeper application
"""

from services.exceptions import (
    AdherenceEngineError,
    NotFoundError,
    InvalidArgumentError,
    ConflictError,
    StorageUnavailableError,
)
from services.schedule_service import (
    ScheduleService,
    DoseOccurrence,
    OccurrenceState,
    project_occurrences,
    schedule_service,
)
from services.dose_service import DoseService, dose_service
from services.alert_service import AlertService, FanoutResult, alert_service
from services.link_service import LinkService, link_service
from services.medication_service import MedicationService, medication_service
from services.notification_service import NotificationService, notification_service


__all__ = [
    # Errors
    "AdherenceEngineError",
    "NotFoundError",
    "InvalidArgumentError",
    "ConflictError",
    "StorageUnavailableError",
    # Service classes
    "ScheduleService",
    "DoseService",
    "AlertService",
    "LinkService",
    "MedicationService",
    "NotificationService",
    # Value types
    "DoseOccurrence",
    "OccurrenceState",
    "FanoutResult",
    "project_occurrences",
    # Singleton instances
    "schedule_service",
    "dose_service",
    "alert_service",
    "link_service",
    "medication_service",
    "notification_service",
]
