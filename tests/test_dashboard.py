import pytest

from hospital_dashboard.application.ports.session_provider import SessionUser
from hospital_dashboard.application.ports.store_client import StoreResult
from hospital_dashboard.application.services.dashboard import Dashboard
from hospital_dashboard.application.services.entity_module import Option
from hospital_dashboard.application.services.form_controller import FormPhase
from hospital_dashboard.exceptions import NotFoundError, StoreError
from hospital_dashboard.infrastructure.auth.memory_session import InMemorySessionProvider

from conftest import DR_A, P1, RecordingStore


class PickerOutage(RecordingStore):
    """Fails list calls for one collection only"""

    def __init__(self, inner, broken):
        super().__init__(inner)
        self.broken = broken

    async def list(self, collection, embed=(), order_by=None, direction=None):
        if collection == self.broken:
            self.calls.append(("list", collection, tuple(embed), order_by, direction))
            return StoreResult.failure("unavailable", f"{collection} offline")
        return await super().list(collection, embed=embed, order_by=order_by, direction=direction)


@pytest.fixture
def session():
    return InMemorySessionProvider(SessionUser(id="u1", email="admin@hospital.test"))


@pytest.fixture
def dashboard(store, session):
    return Dashboard(store, session, delete_ttl_seconds=60)


async def _save(module, values):
    module.open_create()
    for key, value in values.items():
        module.form.set_field(key, value)
    return await module.form.submit()


@pytest.mark.asyncio
async def test_starts_on_doctors_and_shares_one_client(store, dashboard):
    assert dashboard.active_name == "doctors"
    assert set(dashboard.modules) == {"doctors", "patients", "appointments"}
    assert {m.repository.client for m in dashboard.modules.values()} == {store}
    assert dashboard.active.view().loading is False


@pytest.mark.asyncio
async def test_saving_a_form_refreshes_the_cache(dashboard):
    doctors = dashboard.modules["doctors"]
    saved = await _save(doctors, DR_A)
    assert [d.id for d in doctors.records] == [saved.id]
    assert doctors.view().items[0].experience == "5 years experience"
    assert doctors.form.state.phase == FormPhase.CLOSED


@pytest.mark.asyncio
async def test_open_edit_requires_a_cached_record(dashboard):
    with pytest.raises(NotFoundError):
        dashboard.modules["doctors"].open_edit("missing")


@pytest.mark.asyncio
async def test_switching_discards_open_form_and_reloads(store, dashboard):
    doctors = dashboard.modules["doctors"]
    doctors.open_create()
    doctors.form.set_field("full_name", "half typed")

    module = await dashboard.switch_to("patients")
    assert module is dashboard.modules["patients"]
    assert dashboard.active_name == "patients"
    assert not doctors.form.state.is_open
    assert store.writes() == []
    assert store.calls[-1][:2] == ("list", "patients")

    with pytest.raises(ValueError):
        await dashboard.switch_to("billing")


@pytest.mark.asyncio
async def test_appointments_module_builds_picker_options(dashboard):
    doctor = await _save(dashboard.modules["doctors"], DR_A)
    patient = await _save(dashboard.modules["patients"], P1)
    appointments = await dashboard.switch_to("appointments")

    assert appointments.patient_options == (Option(patient.id, "P1"),)
    assert appointments.doctor_options == (Option(doctor.id, "Dr. A - Cardiology"),)
    assert appointments.options_error is None


@pytest.mark.asyncio
async def test_picker_failure_does_not_fail_the_list(clock, session):
    from hospital_dashboard.infrastructure.store import InMemoryStoreClient

    dashboard = Dashboard(PickerOutage(InMemoryStoreClient(clock=clock), "doctors"), session)
    await _save(dashboard.modules["patients"], P1)
    appointments = await dashboard.switch_to("appointments")

    assert appointments.error is None
    assert appointments.options_error == "doctors offline"
    assert appointments.doctor_options == ()
    assert len(appointments.patient_options) == 1


@pytest.mark.asyncio
async def test_refresh_failure_keeps_previous_records(clock, session):
    from hospital_dashboard.infrastructure.store import InMemoryStoreClient

    inner = InMemoryStoreClient(clock=clock)
    healthy = Dashboard(inner, session)
    await _save(healthy.modules["doctors"], DR_A)

    broken = Dashboard(PickerOutage(inner, "doctors"), session)
    doctors = broken.modules["doctors"]
    doctors._records = healthy.modules["doctors"].records
    with pytest.raises(StoreError):
        await doctors.refresh()
    assert doctors.error == "doctors offline"
    assert len(doctors.records) == 1
    assert doctors.view().error == "doctors offline"


@pytest.mark.asyncio
async def test_user_email_and_sign_out(dashboard):
    assert dashboard.user_email == "admin@hospital.test"
    await dashboard.sign_out()
    assert dashboard.user_email is None


@pytest.mark.asyncio
async def test_schedule_then_complete_appointment(store, dashboard):
    doctor = await _save(dashboard.modules["doctors"], DR_A)
    patient = await _save(dashboard.modules["patients"], P1)
    appointments = await dashboard.switch_to("appointments")

    await _save(appointments, {
        "patient_id": patient.id,
        "doctor_id": doctor.id,
        "appointment_date": "2024-06-01",
        "appointment_time": "09:30",
        "reason": "Checkup",
    })
    [row] = appointments.records
    assert row.patient.full_name == "P1"
    assert row.doctor.full_name == "Dr. A"
    assert appointments.view().items[0].presentation.category == "pending"

    appointments.open_edit(row.id)
    assert appointments.form.state.draft.get("notes") == ""
    appointments.form.set_field("status", "completed")
    await appointments.form.submit()

    [row] = appointments.records
    assert row.status.value == "completed"
    summary = appointments.view().items[0]
    assert summary.presentation.category == "success"
    assert summary.patient_name == "P1"
    assert summary.scheduled_for == "6/1/2024 at 09:30"

    assert await appointments.deletion.request_delete(row.id, lambda req: True) is True
    assert appointments.records == ()
    assert appointments.view().is_empty
