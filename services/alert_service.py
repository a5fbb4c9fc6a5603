"""
Alert Service
Fans out SOS alerts to every caregiver linked to a patient
"""

import logging
from typing import Dict, List, Optional, Any, Tuple
from dataclasses import dataclass, field
from sqlalchemy.orm import Session

import models
from models import NotificationKind
from config import settings
from services.base import BaseService, Clock
from services.exceptions import StorageUnavailableError
from services.link_service import LinkService
from tools.push_sender import PushSender, get_push_sender


logger = logging.getLogger(__name__)


DEFAULT_PATIENT_NAME = "Patient"


@dataclass
class FanoutResult:
    """Aggregate outcome of one SOS fan-out"""
    attempted: int = 0
    delivered: int = 0
    failed: int = 0
    skipped: int = 0  # linked caregivers without a push token
    unpersisted: int = 0  # notifications that could not be stored
    notification_ids: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attempted": self.attempted,
            "delivered": self.delivered,
            "failed": self.failed,
            "skipped": self.skipped,
            "unpersisted": self.unpersisted,
            "notification_ids": list(self.notification_ids),
        }


def format_location(latitude: Optional[float], longitude: Optional[float]) -> str:
    """Map link when both coordinates are known"""
    if latitude is None or longitude is None:
        return "Location not available"
    url = settings.MAPS_URL_TEMPLATE.format(latitude=latitude, longitude=longitude)
    return f"Location: {url}"


def compose_sos_message(
    patient_name: str,
    latitude: Optional[float],
    longitude: Optional[float]
) -> Tuple[str, str]:
    """Title and body of an SOS alert"""
    title = f"SOS from {patient_name}"
    body = f"EMERGENCY! {patient_name} needs help. {format_location(latitude, longitude)}"
    return title, body


class AlertService(BaseService):
    """
    Service for emergency alert fan-out

    Push delivery is best effort: a failed or raising send is counted and the
    fan-out continues. Every attempted caregiver gets a stored notification
    whatever the delivery outcome, committed one at a time. A row that cannot
    be stored is counted in `unpersisted` and the fan-out carries on.
    """

    def __init__(
        self,
        session_factory=None,
        clock: Optional[Clock] = None,
        push_sender: Optional[PushSender] = None,
        link_service: Optional[LinkService] = None
    ):
        super().__init__(session_factory, clock)
        self.push_sender = push_sender or get_push_sender()
        self.link_service = link_service or LinkService(self.session_factory, self.clock)

    async def send_sos_alert(
        self,
        patient_id: int,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        db: Optional[Session] = None
    ) -> FanoutResult:
        """
        Alert every caregiver linked to a patient

        Args:
            patient_id: Patient raising the alert
            latitude: Optional latitude
            longitude: Optional longitude
            db: Database session

        Returns:
            FanoutResult with attempted/delivered/failed counts

        Raises:
            StorageUnavailableError: patient or caregivers could not be resolved.
                Failures storing individual notifications are only counted.
        """
        def _patient_name(session: Session) -> str:
            patient = session.query(models.User).filter(models.User.id == patient_id).first()
            return patient.name if patient and patient.name else DEFAULT_PATIENT_NAME

        patient_name = self._run(_patient_name, db)
        caregivers = await self.link_service.list_linked_caregivers(patient_id, db=db)

        result = FanoutResult()
        if not caregivers:
            logger.info(f"SOS from patient {patient_id}: no linked caregivers")
            return result

        title, body = compose_sos_message(patient_name, latitude, longitude)
        data = {
            "type": NotificationKind.SOS.value,
            "patient_id": patient_id,
            "latitude": latitude,
            "longitude": longitude,
        }

        for caregiver in caregivers:
            if not caregiver.push_token:
                result.skipped += 1
                if settings.SOS_NOTIFY_WITHOUT_PUSH_TOKEN:
                    self._record_notification(result, caregiver.id, title, body, data, db)
                continue

            result.attempted += 1
            if await self._deliver(caregiver, title, body, data):
                result.delivered += 1
            else:
                result.failed += 1

            self._record_notification(result, caregiver.id, title, body, data, db)

        logger.info(
            f"SOS from patient {patient_id}: attempted={result.attempted} "
            f"delivered={result.delivered} failed={result.failed} skipped={result.skipped} "
            f"unpersisted={result.unpersisted}"
        )
        return result

    async def _deliver(
        self,
        caregiver: models.User,
        title: str,
        body: str,
        data: Dict[str, Any]
    ) -> bool:
        try:
            delivered = await self.push_sender.send(caregiver.push_token, title, body, data)
        except Exception as e:
            logger.warning(f"SOS push to caregiver {caregiver.id} raised: {e}")
            return False

        if not delivered:
            logger.warning(f"SOS push to caregiver {caregiver.id} failed")
        return bool(delivered)

    def _record_notification(
        self,
        result: FanoutResult,
        user_id: int,
        title: str,
        body: str,
        data: Dict[str, Any],
        db: Optional[Session] = None
    ) -> None:
        try:
            result.notification_ids.append(self._store_notification(user_id, title, body, data, db))
        except StorageUnavailableError as e:
            result.unpersisted += 1
            logger.warning(f"SOS notification for caregiver {user_id} not stored: {e}")

    def _store_notification(
        self,
        user_id: int,
        title: str,
        body: str,
        data: Dict[str, Any],
        db: Optional[Session] = None
    ) -> int:
        def _store(session: Session) -> int:
            notification = models.Notification(
                user_id=user_id,
                type=NotificationKind.SOS.value,
                title=title,
                body=body,
                data=data,
                sent_at=self.clock()
            )
            session.add(notification)
            session.commit()
            return notification.id

        return self._run(_store, db)


# Singleton instance
alert_service = AlertService()
