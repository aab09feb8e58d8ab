import asyncio

import pytest

from hospital_dashboard.application.services.form_controller import (
    APPOINTMENT_FORM,
    DOCTOR_FORM,
    PATIENT_FORM,
    FormController,
    FormMode,
    FormPhase,
)
from hospital_dashboard.exceptions import DuplicateSubmissionError, FormStateError, ValidationError

from conftest import DR_A, P1, RecordingStore


class GatedStore(RecordingStore):
    """Writes wait until the test opens the gate"""

    def __init__(self, inner=None):
        super().__init__(inner)
        self.gate = asyncio.Event()
        self.entered = asyncio.Event()

    async def insert(self, collection, record):
        self.entered.set()
        await self.gate.wait()
        return await super().insert(collection, record)


def _fill(controller, values):
    for key, value in values.items():
        controller.set_field(key, value)


def test_blank_drafts_carry_per_kind_defaults():
    assert DOCTOR_FORM.blank_draft().get("experience_years") == 0
    assert PATIENT_FORM.blank_draft().get("gender") == "Male"
    assert APPOINTMENT_FORM.blank_draft().get("status") == "scheduled"
    assert APPOINTMENT_FORM.blank_draft().get("notes") == ""


def test_titles_and_submit_labels(doctors):
    form = FormController(DOCTOR_FORM, doctors)
    form.open_create()
    assert (form.title, form.submit_label) == ("Add Doctor", "Add")
    form.cancel()
    appt = FormController(APPOINTMENT_FORM, doctors)
    appt.open_create()
    assert (appt.title, appt.submit_label) == ("Schedule Appointment", "Schedule")


def test_draft_is_immutable_and_rejects_unknown_fields():
    draft = DOCTOR_FORM.blank_draft()
    changed = draft.with_field("full_name", "Dr. A")
    assert draft.get("full_name") == ""
    assert changed.get("full_name") == "Dr. A"
    with pytest.raises(TypeError):
        draft.values["full_name"] = "x"
    with pytest.raises(FormStateError):
        draft.with_field("nickname", "x")


def test_set_field_replaces_the_draft(doctors):
    form = FormController(DOCTOR_FORM, doctors)
    opened = form.open_create()
    after = form.set_field("full_name", "Dr. A")
    assert opened.draft is not after.draft
    assert opened.draft.get("full_name") == ""
    assert form.state.draft.get("full_name") == "Dr. A"


@pytest.mark.asyncio
async def test_set_field_and_submit_require_an_open_form(doctors):
    form = FormController(DOCTOR_FORM, doctors)
    with pytest.raises(FormStateError):
        form.set_field("full_name", "x")
    with pytest.raises(FormStateError):
        await form.submit()


def test_opening_twice_is_rejected(doctors):
    form = FormController(DOCTOR_FORM, doctors)
    form.open_create()
    with pytest.raises(FormStateError):
        form.open_create()


@pytest.mark.asyncio
async def test_submit_create_persists_and_closes(store, doctors):
    refreshed = []

    async def on_saved():
        refreshed.append(await doctors.list())

    form = FormController(DOCTOR_FORM, doctors, on_saved=on_saved)
    form.open_create()
    _fill(form, DR_A)
    saved = await form.submit()

    assert saved.full_name == "Dr. A"
    assert form.state.phase == FormPhase.CLOSED
    assert [c[0] for c in store.writes()] == ["insert"]
    assert [d.id for d in refreshed[0]] == [saved.id]


@pytest.mark.asyncio
async def test_open_edit_maps_missing_optionals_to_empty_strings(patients):
    patient = await patients.create(P1)
    form = FormController(PATIENT_FORM, patients)
    state = form.open_edit(patient)

    assert state.mode == FormMode.EDIT
    assert state.target_id == patient.id
    assert state.draft.get("blood_group") == ""
    assert state.draft.get("date_of_birth") == "1990-01-01"
    assert "id" not in state.draft.values
    assert form.title == "Edit Patient"
    assert form.submit_label == "Update"


@pytest.mark.asyncio
async def test_submit_edit_updates_target_record(store, doctors):
    doctor = await doctors.create(DR_A)
    form = FormController(DOCTOR_FORM, doctors)
    form.open_edit(doctor)
    form.set_field("experience_years", "12")
    saved = await form.submit()

    assert saved.id == doctor.id
    assert saved.experience_years == 12
    assert store.writes()[-1][0:3] == ("update", "doctors", doctor.id)
    assert form.state.phase == FormPhase.CLOSED


@pytest.mark.asyncio
async def test_failed_submit_keeps_draft_and_reports_error(store, doctors):
    form = FormController(DOCTOR_FORM, doctors)
    form.open_create()
    form.set_field("full_name", "Dr. A")

    with pytest.raises(ValidationError):
        await form.submit()

    assert form.state.phase == FormPhase.DRAFTING
    assert form.state.draft.get("full_name") == "Dr. A"
    assert "specialization" in form.state.error
    assert store.writes() == []

    _fill(form, dict(DR_A))
    await form.submit()
    assert form.state.phase == FormPhase.CLOSED
    assert form.state.error is None


@pytest.mark.asyncio
async def test_second_submit_while_in_flight_is_rejected(clock):
    from hospital_dashboard.application.repositories import DoctorRepository
    from hospital_dashboard.infrastructure.store import InMemoryStoreClient

    gated = GatedStore(InMemoryStoreClient(clock=clock))
    form = FormController(DOCTOR_FORM, DoctorRepository(gated))
    form.open_create()
    _fill(form, DR_A)

    first = asyncio.ensure_future(form.submit())
    await gated.entered.wait()
    assert form.state.is_submitting
    with pytest.raises(DuplicateSubmissionError):
        await form.submit()
    with pytest.raises(FormStateError):
        form.set_field("full_name", "Dr. B")

    gated.gate.set()
    await first
    assert len(gated.writes()) == 1
    assert form.state.phase == FormPhase.CLOSED


@pytest.mark.asyncio
async def test_cancel_discards_draft_without_writes(store, doctors):
    doctor = await doctors.create(DR_A)
    before = await doctors.list()
    form = FormController(DOCTOR_FORM, doctors)
    form.open_edit(doctor)
    form.set_field("full_name", "Someone else")
    state = form.cancel()

    assert state.phase == FormPhase.CLOSED
    assert state.draft is None
    assert [c[0] for c in store.writes()] == ["insert"]
    assert await doctors.list() == before


@pytest.mark.asyncio
async def test_cancel_during_submit_ignores_the_late_result(clock):
    from hospital_dashboard.application.repositories import DoctorRepository
    from hospital_dashboard.infrastructure.store import InMemoryStoreClient

    gated = GatedStore(InMemoryStoreClient(clock=clock))
    form = FormController(DOCTOR_FORM, DoctorRepository(gated))
    form.open_create()
    _fill(form, DR_A)

    pending = asyncio.ensure_future(form.submit())
    await gated.entered.wait()
    form.cancel()
    reopened = form.open_create()

    gated.gate.set()
    await pending
    assert form.state == reopened
    assert form.state.draft.as_dict() == dict(DOCTOR_FORM.defaults)
