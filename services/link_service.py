"""
Link Service
Patient/caregiver links used for authorization and alert targeting
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func

import models
from models import UserRole
from services.base import BaseService
from services.exceptions import NotFoundError


logger = logging.getLogger(__name__)


class LinkService(BaseService):
    """
    Service for the patient/caregiver link registry
    """

    async def create_link(
        self,
        patient_email: str,
        caregiver_id: int,
        db: Optional[Session] = None
    ) -> models.PatientCaregiver:
        """
        Link a caregiver to the patient registered under `patient_email`.
        Linking an already linked pair is a no-op that returns the existing link.
        """
        def _create(session: Session) -> models.PatientCaregiver:
            patient = session.query(models.User).filter(
                func.lower(models.User.email) == patient_email.strip().lower(),
                models.User.role == UserRole.PATIENT
            ).first()
            if not patient:
                raise NotFoundError(f"Patient {patient_email} not found")

            caregiver = session.query(models.User).filter(
                models.User.id == caregiver_id,
                models.User.role == UserRole.CAREGIVER
            ).first()
            if not caregiver:
                raise NotFoundError(f"Caregiver {caregiver_id} not found")

            existing = self._find_link(session, patient.id, caregiver_id)
            if existing:
                return existing

            link = models.PatientCaregiver(patient_id=patient.id, caregiver_id=caregiver_id)
            session.add(link)
            try:
                session.commit()
            except IntegrityError:
                # Concurrent request created the same pair
                session.rollback()
                return self._find_link(session, patient.id, caregiver_id)

            session.refresh(link)
            logger.info(f"Linked caregiver {caregiver_id} to patient {patient.id}")
            return link

        return self._run(_create, db)

    async def list_linked_patients(
        self,
        caregiver_id: int,
        db: Optional[Session] = None
    ) -> List[models.User]:
        """Patients linked to a caregiver; callers must not depend on order"""
        def _get(session: Session) -> List[models.User]:
            return session.query(models.User).join(
                models.PatientCaregiver,
                models.PatientCaregiver.patient_id == models.User.id
            ).filter(
                models.PatientCaregiver.caregiver_id == caregiver_id
            ).all()

        return self._run(_get, db)

    async def list_linked_caregivers(
        self,
        patient_id: int,
        db: Optional[Session] = None
    ) -> List[models.User]:
        """Caregivers linked to a patient"""
        def _get(session: Session) -> List[models.User]:
            return session.query(models.User).join(
                models.PatientCaregiver,
                models.PatientCaregiver.caregiver_id == models.User.id
            ).filter(
                models.PatientCaregiver.patient_id == patient_id
            ).order_by(models.User.id).all()

        return self._run(_get, db)

    async def can_access_patient_data(
        self,
        actor_id: int,
        patient_id: int,
        db: Optional[Session] = None
    ) -> bool:
        """
        Single capability check for patient-scoped data: the patient
        themselves, or a caregiver linked to them.
        """
        def _check(session: Session) -> bool:
            actor = session.query(models.User).filter(models.User.id == actor_id).first()
            if not actor:
                return False

            if actor.id == patient_id:
                return True

            if actor.is_caregiver:
                return self._find_link(session, patient_id, actor.id) is not None

            return False

        return self._run(_check, db)

    @staticmethod
    def _find_link(
        session: Session,
        patient_id: int,
        caregiver_id: int
    ) -> Optional[models.PatientCaregiver]:
        return session.query(models.PatientCaregiver).filter(
            models.PatientCaregiver.patient_id == patient_id,
            models.PatientCaregiver.caregiver_id == caregiver_id
        ).first()


# Singleton instance
link_service = LinkService()
