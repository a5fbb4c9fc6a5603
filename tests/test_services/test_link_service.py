"""
Tests for Link Service
Tests the patient/caregiver link registry and data access checks
"""

import pytest

from models import PatientCaregiver, UserRole
from services.exceptions import NotFoundError


class TestCreateLink:
    """Tests for LinkService.create_link"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_links_by_patient_email(self, link_service, db_session, test_patient, test_caregiver):
        link = await link_service.create_link("maria.lopez@example.com", test_caregiver.id, db=db_session)

        assert link.patient_id == test_patient.id
        assert link.caregiver_id == test_caregiver.id

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_email_match_ignores_case_and_spaces(self, link_service, db_session, test_patient, test_caregiver):
        link = await link_service.create_link("  Maria.Lopez@Example.com ", test_caregiver.id, db=db_session)

        assert link.patient_id == test_patient.id

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_relinking_is_a_noop(self, link_service, db_session, test_patient, test_caregiver):
        first = await link_service.create_link(test_patient.email, test_caregiver.id, db=db_session)
        second = await link_service.create_link(test_patient.email, test_caregiver.id, db=db_session)

        assert first.id == second.id
        assert db_session.query(PatientCaregiver).count() == 1

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_unknown_patient_email(self, link_service, db_session, test_caregiver):
        with pytest.raises(NotFoundError):
            await link_service.create_link("nobody@example.com", test_caregiver.id, db=db_session)

        assert db_session.query(PatientCaregiver).count() == 0

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_email_of_a_caregiver_is_not_a_patient(self, link_service, db_session, test_caregiver, make_user):
        other = make_user("jo.park@example.com", "Jo Park", role=UserRole.CAREGIVER)

        with pytest.raises(NotFoundError):
            await link_service.create_link(other.email, test_caregiver.id, db=db_session)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_unknown_caregiver(self, link_service, db_session, test_patient):
        with pytest.raises(NotFoundError):
            await link_service.create_link(test_patient.email, 9999, db=db_session)


class TestListLinks:
    """Tests for listing linked patients and caregivers"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_list_linked_patients(self, link_service, db_session, linked_caregiver, test_patient, make_user):
        second = make_user("lee.chen@example.com", "Lee Chen")
        await link_service.create_link(second.email, linked_caregiver.id, db=db_session)

        patients = await link_service.list_linked_patients(linked_caregiver.id, db=db_session)

        assert {p.id for p in patients} == {test_patient.id, second.id}

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_caregiver_without_links(self, link_service, db_session, test_caregiver):
        assert await link_service.list_linked_patients(test_caregiver.id, db=db_session) == []

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_list_linked_caregivers(self, link_service, db_session, linked_caregiver, test_patient):
        caregivers = await link_service.list_linked_caregivers(test_patient.id, db=db_session)

        assert [c.id for c in caregivers] == [linked_caregiver.id]


class TestCanAccessPatientData:
    """Tests for the patient data access check"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_patient_reads_own_data(self, link_service, db_session, test_patient):
        assert await link_service.can_access_patient_data(test_patient.id, test_patient.id, db=db_session)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_linked_caregiver(self, link_service, db_session, linked_caregiver, test_patient):
        assert await link_service.can_access_patient_data(linked_caregiver.id, test_patient.id, db=db_session)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_unlinked_caregiver(self, link_service, db_session, test_caregiver, test_patient):
        assert not await link_service.can_access_patient_data(test_caregiver.id, test_patient.id, db=db_session)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_other_patient(self, link_service, db_session, test_patient, make_user):
        other = make_user("lee.chen@example.com", "Lee Chen")

        assert not await link_service.can_access_patient_data(other.id, test_patient.id, db=db_session)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_unknown_actor(self, link_service, db_session, test_patient):
        assert not await link_service.can_access_patient_data(9999, test_patient.id, db=db_session)
