"""
Dose Service
Validates and applies dose-log transitions together with the supply side effect
"""

import logging
from typing import Dict, List, Optional, Any, Union
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import desc

import models
from models import DoseStatus
from config import settings
from services.base import BaseService
from services.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from tools.time_utils import ensure_datetime


logger = logging.getLogger(__name__)


def parse_dose_status(value: Union[DoseStatus, str]) -> DoseStatus:
    """Accept only the persisted states; 'upcoming' is derived and rejected"""
    if isinstance(value, DoseStatus):
        return value
    try:
        return DoseStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in DoseStatus)
        raise InvalidArgumentError(f"Invalid dose status {value!r}; expected one of: {allowed}")


class DoseService(BaseService):
    """
    Service for dose logging
    """

    async def log_dose(
        self,
        medication_id: int,
        scheduled_datetime: Union[datetime, str],
        status: Union[DoseStatus, str],
        actual_datetime: Optional[Union[datetime, str]] = None,
        schedule_id: Optional[int] = None,
        notes: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.DoseLog:
        """
        Log a dose event

        The log insert and the supply decrement for a taken dose commit
        together or not at all. Supply is decremented only while it is above
        zero.

        Args:
            medication_id: Medication ID
            scheduled_datetime: When the dose was due
            status: taken, missed or skipped
            actual_datetime: When it was logged (default: now)
            schedule_id: Slot the dose belongs to
            notes: Free-text notes
            db: Database session

        Returns:
            Created DoseLog object

        Raises:
            InvalidArgumentError: bad status or unparsable datetime
            NotFoundError: unknown medication or slot
            ConflictError: a log already exists for this slot and day
        """
        dose_status = parse_dose_status(status)
        try:
            scheduled_dt = ensure_datetime(scheduled_datetime)
            actual_dt = ensure_datetime(actual_datetime)
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from e

        if scheduled_dt is None:
            raise InvalidArgumentError("scheduled_datetime is required")
        actual_dt = actual_dt or self.clock()

        def _log(session: Session) -> models.DoseLog:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()
            if not medication:
                raise NotFoundError(f"Medication {medication_id} not found")

            if schedule_id is not None:
                slot = session.query(models.MedicationSchedule).filter(
                    models.MedicationSchedule.id == schedule_id,
                    models.MedicationSchedule.medication_id == medication_id
                ).first()
                if not slot:
                    raise NotFoundError(
                        f"Schedule {schedule_id} not found for medication {medication_id}"
                    )

            log = models.DoseLog(
                medication_id=medication_id,
                schedule_id=schedule_id,
                scheduled_datetime=scheduled_dt,
                scheduled_date=scheduled_dt.date(),
                actual_datetime=actual_dt,
                status=dose_status,
                notes=notes
            )

            try:
                session.add(log)
                session.flush()

                if dose_status == DoseStatus.TAKEN:
                    session.query(models.Medication).filter(
                        models.Medication.id == medication_id,
                        models.Medication.current_supply > 0
                    ).update(
                        {models.Medication.current_supply: models.Medication.current_supply - 1},
                        synchronize_session=False
                    )
                    session.expire(medication, ["current_supply"])

                session.commit()
            except IntegrityError as e:
                session.rollback()
                logger.warning(
                    f"Duplicate dose log for medication {medication_id}, "
                    f"schedule {schedule_id} on {scheduled_dt.date().isoformat()}"
                )
                raise ConflictError(
                    f"Dose already logged for medication {medication_id}, "
                    f"schedule {schedule_id} on {scheduled_dt.date().isoformat()}"
                ) from e

            session.refresh(log)
            logger.info(
                f"Logged dose for medication {medication_id}: {dose_status.value}"
            )
            return log

        return self._run(_log, db)

    async def get_dose_logs(
        self,
        patient_id: int,
        limit: Optional[int] = None,
        db: Optional[Session] = None
    ) -> List[Dict[str, Any]]:
        """Recent dose logs across a patient's medications, newest first"""
        limit = limit or settings.DOSE_LOG_HISTORY_LIMIT

        def _get(session: Session) -> List[Dict[str, Any]]:
            rows = session.query(models.DoseLog, models.Medication.name).join(
                models.Medication,
                models.DoseLog.medication_id == models.Medication.id
            ).filter(
                models.Medication.patient_id == patient_id
            ).order_by(
                desc(models.DoseLog.actual_datetime),
                desc(models.DoseLog.id)
            ).limit(limit).all()

            return [
                {
                    "id": log.id,
                    "medication_id": log.medication_id,
                    "medication_name": name,
                    "schedule_id": log.schedule_id,
                    "scheduled_datetime": log.scheduled_datetime.isoformat(),
                    "actual_datetime": log.actual_datetime.isoformat() if log.actual_datetime else None,
                    "status": log.status.value,
                    "notes": log.notes,
                }
                for log, name in rows
            ]

        return self._run(_get, db)


# Singleton instance
dose_service = DoseService()
