"""
Medication Service
Business logic for medications and their reminder slots
"""

import logging
from typing import Dict, List, Optional, Any, Iterable, Union
from datetime import date, time
from sqlalchemy.orm import Session
from sqlalchemy import desc

import models
from services.base import BaseService
from services.exceptions import InvalidArgumentError, NotFoundError
from tools.time_utils import ensure_time


logger = logging.getLogger(__name__)


UPDATABLE_FIELDS = {
    'name', 'dosage', 'frequency', 'instructions', 'start_date',
    'end_date', 'is_active', 'current_supply', 'refill_threshold'
}


def _check_non_negative(field: str, value: Optional[int]) -> None:
    if value is not None and value < 0:
        raise InvalidArgumentError(f"{field} must be zero or greater")


def normalize_days_of_week(days: Optional[Iterable[int]]) -> Optional[List[int]]:
    """Deduplicate and sort weekday indices (0 = Sunday .. 6 = Saturday)"""
    if days is None:
        return None
    days = list(days)
    for day in days:
        if not isinstance(day, int) or isinstance(day, bool) or not 0 <= day <= 6:
            raise InvalidArgumentError(f"Invalid weekday index {day!r}; expected 0-6")
    return sorted(set(days)) or None


class MedicationService(BaseService):
    """
    Service for medication-related operations
    """

    async def create_medication(
        self,
        patient_id: int,
        name: str,
        dosage: str,
        frequency: str,
        instructions: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        current_supply: Optional[int] = None,
        refill_threshold: Optional[int] = None,
        db: Optional[Session] = None
    ) -> models.Medication:
        """
        Add a new medication for a patient

        Args:
            patient_id: Patient ID
            name: Medication name
            dosage: Dosage (e.g., "10mg")
            frequency: Frequency description (e.g., "once daily")
            instructions: Special instructions
            start_date: Start date (default: today)
            end_date: End date (if temporary)
            current_supply: Doses on hand
            refill_threshold: Supply level that triggers a refill reminder
            db: Database session

        Returns:
            Created Medication object
        """
        _check_non_negative("current_supply", current_supply)
        _check_non_negative("refill_threshold", refill_threshold)
        start = start_date or self.clock().date()
        if end_date and end_date < start:
            raise InvalidArgumentError("end_date cannot be before start_date")

        def _add(session: Session) -> models.Medication:
            patient = session.query(models.User).filter(
                models.User.id == patient_id
            ).first()
            if not patient:
                raise NotFoundError(f"Patient {patient_id} not found")

            medication = models.Medication(
                patient_id=patient_id,
                name=name,
                dosage=dosage,
                frequency=frequency,
                instructions=instructions,
                start_date=start,
                end_date=end_date,
                current_supply=current_supply,
                refill_threshold=refill_threshold,
                is_active=True
            )

            session.add(medication)
            session.commit()
            session.refresh(medication)

            logger.info(f"Added medication {name} for patient {patient_id}")
            return medication

        return self._run(_add, db)

    async def get_medication(
        self,
        medication_id: int,
        db: Optional[Session] = None
    ) -> models.Medication:
        """Get medication by ID"""
        def _get(session: Session) -> models.Medication:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()
            if not medication:
                raise NotFoundError(f"Medication {medication_id} not found")
            return medication

        return self._run(_get, db)

    async def get_patient_medications(
        self,
        patient_id: int,
        active_only: bool = False,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """Get all medications for a patient, newest first"""
        def _get(session: Session) -> List[models.Medication]:
            query = session.query(models.Medication).filter(
                models.Medication.patient_id == patient_id
            )

            if active_only:
                query = query.filter(models.Medication.is_active == True)

            return query.order_by(
                desc(models.Medication.created_at),
                desc(models.Medication.id)
            ).all()

        return self._run(_get, db)

    async def update_medication(
        self,
        medication_id: int,
        updates: Dict[str, Any],
        db: Optional[Session] = None
    ) -> models.Medication:
        """Apply a partial update; fields outside the allow-list are ignored"""
        changes = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}
        _check_non_negative("current_supply", changes.get("current_supply"))
        _check_non_negative("refill_threshold", changes.get("refill_threshold"))
        for required in ("name", "dosage", "frequency", "start_date", "is_active"):
            if required in changes and changes[required] is None:
                raise InvalidArgumentError(f"{required} cannot be null")

        def _update(session: Session) -> models.Medication:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()
            if not medication:
                raise NotFoundError(f"Medication {medication_id} not found")

            for field, value in changes.items():
                setattr(medication, field, value)

            if medication.end_date and medication.start_date and medication.end_date < medication.start_date:
                session.rollback()
                raise InvalidArgumentError("end_date cannot be before start_date")

            medication.updated_at = self.clock()
            session.commit()
            session.refresh(medication)

            return medication

        return self._run(_update, db)

    async def deactivate_medication(
        self,
        medication_id: int,
        db: Optional[Session] = None
    ) -> models.Medication:
        """Soft-deactivate a medication; its slots drop out of daily projections"""
        return await self.update_medication(medication_id, {'is_active': False}, db)

    async def delete_medication(
        self,
        medication_id: int,
        db: Optional[Session] = None
    ) -> None:
        """Hard-delete a medication with its slots and dose logs"""
        def _delete(session: Session) -> None:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()
            if not medication:
                raise NotFoundError(f"Medication {medication_id} not found")

            session.delete(medication)
            session.commit()
            logger.info(f"Deleted medication {medication_id}")

        self._run(_delete, db)

    async def add_schedule_slot(
        self,
        medication_id: int,
        scheduled_time: Union[time, str],
        days_of_week: Optional[Iterable[int]] = None,
        db: Optional[Session] = None
    ) -> models.MedicationSchedule:
        """
        Attach a recurring reminder slot to a medication

        Args:
            medication_id: Medication ID
            scheduled_time: Time of day, as time or "HH:MM"
            days_of_week: Weekday indices, 0 = Sunday; None for every day
            db: Database session
        """
        try:
            slot_time = ensure_time(scheduled_time)
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from e
        if slot_time is None:
            raise InvalidArgumentError("scheduled_time is required")
        days = normalize_days_of_week(days_of_week)

        def _create(session: Session) -> models.MedicationSchedule:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()
            if not medication:
                raise NotFoundError(f"Medication {medication_id} not found")

            slot = models.MedicationSchedule(
                medication_id=medication_id,
                scheduled_time=slot_time,
                days_of_week=days
            )
            session.add(slot)
            session.commit()
            session.refresh(slot)

            logger.info(
                f"Created slot for medication {medication_id} at {slot_time.strftime('%H:%M')}"
            )
            return slot

        return self._run(_create, db)

    async def get_low_supply_medications(
        self,
        patient_id: int,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """Active medications at or below their refill threshold"""
        def _get(session: Session) -> List[models.Medication]:
            return session.query(models.Medication).filter(
                models.Medication.patient_id == patient_id,
                models.Medication.is_active == True,
                models.Medication.current_supply.isnot(None),
                models.Medication.refill_threshold.isnot(None),
                models.Medication.current_supply <= models.Medication.refill_threshold
            ).order_by(models.Medication.current_supply, models.Medication.id).all()

        return self._run(_get, db)


# Singleton instance
medication_service = MedicationService()
