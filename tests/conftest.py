"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all DoseKeeper tests.
Fixtures include database sessions, services bound to a test database and
a frozen clock, push sender doubles, sample data and the API test client.
"""

from datetime import datetime, date, time
from typing import Any, Callable, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from database import Base, get_db, create_db_engine, create_session_factory
from models import (
    User, UserRole, Medication, MedicationSchedule, PatientCaregiver, DoseLog, DoseStatus
)
from services import (
    ScheduleService,
    DoseService,
    AlertService,
    LinkService,
    MedicationService,
    NotificationService,
)
from app import app
from tests import FROZEN_NOW


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = create_db_engine("sqlite:///:memory:")

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine) -> sessionmaker:
    """Storage handle bound to the test engine"""
    return create_session_factory(test_engine)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Create a test database session"""
    session = session_factory()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ==================== CLOCK / PUSH FIXTURES ====================

@pytest.fixture
def frozen_clock() -> Callable[[], datetime]:
    """Clock that always reads FROZEN_NOW"""
    return lambda: FROZEN_NOW


class RecordingPushSender:
    """Push sender double; fails or raises for selected tokens"""

    def __init__(self, fail_tokens=(), raise_tokens=()):
        self.fail_tokens = set(fail_tokens)
        self.raise_tokens = set(raise_tokens)
        self.calls: List[Dict[str, Any]] = []

    async def send(
        self,
        token: str,
        title: str,
        body: str,
        data: Optional[Dict[str, Any]] = None
    ) -> bool:
        self.calls.append({"token": token, "title": title, "body": body, "data": data})
        if token in self.raise_tokens:
            raise RuntimeError("push gateway unreachable")
        return token not in self.fail_tokens


@pytest.fixture
def push_sender() -> RecordingPushSender:
    """Push sender that delivers everything"""
    return RecordingPushSender()


# ==================== SERVICE FIXTURES ====================

@pytest.fixture
def schedule_service(session_factory, frozen_clock) -> ScheduleService:
    return ScheduleService(session_factory, frozen_clock)


@pytest.fixture
def dose_service(session_factory, frozen_clock) -> DoseService:
    return DoseService(session_factory, frozen_clock)


@pytest.fixture
def link_service(session_factory, frozen_clock) -> LinkService:
    return LinkService(session_factory, frozen_clock)


@pytest.fixture
def medication_service(session_factory, frozen_clock) -> MedicationService:
    return MedicationService(session_factory, frozen_clock)


@pytest.fixture
def notification_service(session_factory, frozen_clock) -> NotificationService:
    return NotificationService(session_factory, frozen_clock)


@pytest.fixture
def alert_service(session_factory, frozen_clock, push_sender) -> AlertService:
    return AlertService(session_factory, frozen_clock, push_sender=push_sender)


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory for persisted users"""
    def _make(
        email: str,
        name: str,
        role: UserRole = UserRole.PATIENT,
        push_token: Optional[str] = None,
        timezone: str = "UTC"
    ) -> User:
        user = User(email=email, name=name, role=role, push_token=push_token, timezone=timezone)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def test_patient(make_user) -> User:
    """Create and return a test patient"""
    return make_user("maria.lopez@example.com", "Maria Lopez", timezone="America/New_York")


@pytest.fixture
def test_caregiver(make_user) -> User:
    """Create and return a caregiver with a push token"""
    return make_user(
        "sam.lopez@example.com",
        "Sam Lopez",
        role=UserRole.CAREGIVER,
        push_token="ExponentPushToken[sam]"
    )


@pytest.fixture
def linked_caregiver(db_session: Session, test_patient: User, test_caregiver: User) -> User:
    """Caregiver linked to the test patient"""
    db_session.add(PatientCaregiver(patient_id=test_patient.id, caregiver_id=test_caregiver.id))
    db_session.commit()
    return test_caregiver


@pytest.fixture
def test_medication(db_session: Session, test_patient: User) -> Medication:
    """Create and return a test medication linked to test patient"""
    medication = Medication(
        patient_id=test_patient.id,
        name="Lisinopril",
        dosage="10mg",
        frequency="once daily",
        instructions="Take in the morning",
        start_date=date(2024, 3, 1),
        current_supply=30,
        refill_threshold=7,
        is_active=True
    )
    db_session.add(medication)
    db_session.commit()
    db_session.refresh(medication)
    return medication


@pytest.fixture
def morning_slot(db_session: Session, test_medication: Medication) -> MedicationSchedule:
    """Every-day 08:00 slot for the test medication"""
    slot = MedicationSchedule(
        medication_id=test_medication.id,
        scheduled_time=time(8, 0),
        days_of_week=None
    )
    db_session.add(slot)
    db_session.commit()
    db_session.refresh(slot)
    return slot


@pytest.fixture
def make_slot(db_session: Session) -> Callable[..., MedicationSchedule]:
    """Factory for reminder slots"""
    def _make(medication: Medication, at: time, days: Optional[List[int]] = None) -> MedicationSchedule:
        slot = MedicationSchedule(medication_id=medication.id, scheduled_time=at, days_of_week=days)
        db_session.add(slot)
        db_session.commit()
        db_session.refresh(slot)
        return slot

    return _make


@pytest.fixture
def make_log(db_session: Session) -> Callable[..., DoseLog]:
    """Factory for dose logs written directly to the store"""
    def _make(
        slot: MedicationSchedule,
        scheduled: datetime,
        status: DoseStatus = DoseStatus.TAKEN
    ) -> DoseLog:
        log = DoseLog(
            medication_id=slot.medication_id,
            schedule_id=slot.id,
            scheduled_datetime=scheduled,
            scheduled_date=scheduled.date(),
            actual_datetime=scheduled,
            status=status
        )
        db_session.add(log)
        db_session.commit()
        db_session.refresh(log)
        return log

    return _make


# ==================== API FIXTURES ====================

@pytest.fixture(scope="function")
def client(db_session: Session, push_sender, monkeypatch) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database and push sender overrides"""
    from services.alert_service import alert_service as default_alert_service

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(default_alert_service, "push_sender", push_sender)

    yield TestClient(app)

    app.dependency_overrides.clear()


# ==================== MARKERS ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "api: mark test as an API test")
    config.addinivalue_line("markers", "database: mark test as requiring database")
