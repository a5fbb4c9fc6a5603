"""
Schedule Service
Projects recurring medication slots onto a calendar day and merges logged doses
"""

import logging
from typing import Dict, Iterable, List, Optional, Any, Tuple
from dataclasses import dataclass
from datetime import datetime, date, time
from enum import Enum
from sqlalchemy.orm import Session

import models
from models import DoseStatus
from services.base import BaseService
from tools.time_utils import weekday_index, local_today


logger = logging.getLogger(__name__)


class OccurrenceState(str, Enum):
    """Computed state of a dose occurrence; UPCOMING is never persisted"""
    UPCOMING = "upcoming"
    TAKEN = "taken"
    MISSED = "missed"
    SKIPPED = "skipped"

    @classmethod
    def from_status(cls, status: DoseStatus) -> "OccurrenceState":
        return cls(DoseStatus(status).value)


@dataclass(frozen=True)
class DoseOccurrence:
    """One calendar-day instance of a schedule slot"""
    medication_id: int
    medication_name: str
    dosage: str
    schedule_id: int
    scheduled_time: time
    state: OccurrenceState
    dose_log_id: Optional[int] = None
    actual_datetime: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "medication_id": self.medication_id,
            "medication_name": self.medication_name,
            "dosage": self.dosage,
            "schedule_id": self.schedule_id,
            "scheduled_time": self.scheduled_time.strftime("%H:%M"),
            "state": self.state.value,
            "dose_log_id": self.dose_log_id,
            "actual_datetime": self.actual_datetime.isoformat() if self.actual_datetime else None,
        }


def slot_applies_on(days_of_week: Optional[List[int]], day: date) -> bool:
    """A slot with no weekday restriction applies every day"""
    if not days_of_week:
        return True
    return weekday_index(day) in days_of_week


def project_occurrences(
    slots: Iterable[Tuple[models.MedicationSchedule, models.Medication]],
    logs: Iterable[models.DoseLog],
    reference_date: date
) -> List[DoseOccurrence]:
    """
    Merge slots with the day's dose logs.

    Emits exactly one occurrence per slot that applies on `reference_date`.
    When several logs match a slot, the most recent one (highest id) wins.
    """
    latest_log: Dict[Tuple[int, int], models.DoseLog] = {}
    for log in logs:
        if log.schedule_id is None or log.scheduled_date != reference_date:
            continue
        key = (log.medication_id, log.schedule_id)
        current = latest_log.get(key)
        if current is None or log.id > current.id:
            latest_log[key] = log

    occurrences = []
    for slot, medication in slots:
        if not slot_applies_on(slot.days_of_week, reference_date):
            continue

        log = latest_log.get((medication.id, slot.id))
        if log is not None:
            state = OccurrenceState.from_status(log.status)
        else:
            state = OccurrenceState.UPCOMING

        occurrences.append(DoseOccurrence(
            medication_id=medication.id,
            medication_name=medication.name,
            dosage=medication.dosage,
            schedule_id=slot.id,
            scheduled_time=slot.scheduled_time,
            state=state,
            dose_log_id=log.id if log is not None else None,
            actual_datetime=log.actual_datetime if log is not None else None,
        ))

    occurrences.sort(key=lambda o: (o.scheduled_time, o.medication_id, o.schedule_id))
    return occurrences


class ScheduleService(BaseService):
    """
    Service for daily dose projection
    """

    async def get_today_schedule(
        self,
        patient_id: int,
        reference_date: Optional[date] = None,
        db: Optional[Session] = None
    ) -> List[DoseOccurrence]:
        """
        Get the dose occurrences for a patient on a calendar day

        Args:
            patient_id: Patient ID
            reference_date: Day to project (default: the clock's current date)
            db: Database session

        Returns:
            Occurrences ordered by scheduled time, then medication id
        """
        target = reference_date or self.clock().date()

        def _get(session: Session) -> List[DoseOccurrence]:
            slots = session.query(models.MedicationSchedule, models.Medication).join(
                models.Medication,
                models.MedicationSchedule.medication_id == models.Medication.id
            ).filter(
                models.Medication.patient_id == patient_id,
                models.Medication.is_active == True
            ).all()

            if not slots:
                return []

            slot_ids = [slot.id for slot, _ in slots]
            logs = session.query(models.DoseLog).filter(
                models.DoseLog.schedule_id.in_(slot_ids),
                models.DoseLog.scheduled_date == target
            ).all()

            return project_occurrences(slots, logs, target)

        occurrences = self._run(_get, db)
        logger.debug(
            f"Projected {len(occurrences)} occurrences for patient {patient_id} on {target.isoformat()}"
        )
        return occurrences

    async def get_patient_today(
        self,
        patient_id: int,
        db: Optional[Session] = None
    ) -> date:
        """Today's date in the patient's timezone (UTC when unknown)"""
        def _get(session: Session) -> Optional[str]:
            user = session.query(models.User).filter(models.User.id == patient_id).first()
            return user.timezone if user else None

        timezone_name = self._run(_get, db)
        return local_today(timezone_name, self.clock())

    async def get_medication_slots(
        self,
        medication_id: int,
        db: Optional[Session] = None
    ) -> List[models.MedicationSchedule]:
        """Get all slots for a medication"""
        def _get(session: Session) -> List[models.MedicationSchedule]:
            return session.query(models.MedicationSchedule).filter(
                models.MedicationSchedule.medication_id == medication_id
            ).order_by(
                models.MedicationSchedule.scheduled_time,
                models.MedicationSchedule.id
            ).all()

        return self._run(_get, db)


# Singleton instance
schedule_service = ScheduleService()
