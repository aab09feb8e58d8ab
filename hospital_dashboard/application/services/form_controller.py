"""Modal form state machine shared by the doctor, patient and appointment screens.

States are CLOSED and DRAFTING (create, or edit of one record id), with a
SUBMITTING sub-state while a write is in flight. The draft is an immutable
value; every field change produces a new draft.
"""
import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple

from ...exceptions import DashboardError, DuplicateSubmissionError, FormStateError
from ..entities import SERVER_FIELDS
from ..repositories.base import EntityRepository

logger = logging.getLogger(__name__)


class FormPhase(str, Enum):
    CLOSED = "closed"
    DRAFTING = "drafting"
    SUBMITTING = "submitting"


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


@dataclass(frozen=True)
class Draft:
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def with_field(self, key: str, value: Any) -> "Draft":
        if key not in self.values:
            raise FormStateError(f"Unknown form field '{key}'")
        updated = dict(self.values)
        updated[key] = value
        return Draft(updated)

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.values)


@dataclass(frozen=True)
class FormDefinition:
    """Per-entity parameters: which fields the form edits and their defaults"""

    entity_label: str
    defaults: Mapping[str, Any]
    create_title: str
    create_action: str

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(self.defaults)

    @property
    def edit_title(self) -> str:
        return f"Edit {self.entity_label}"

    def blank_draft(self) -> Draft:
        return Draft(self.defaults)

    def draft_from(self, entity: Any) -> Draft:
        values = {}
        for name in self.field_names:
            if name in SERVER_FIELDS:
                continue
            values[name] = _form_value(getattr(entity, name, None))
        return Draft(values)


def _form_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


DOCTOR_FORM = FormDefinition(
    entity_label="Doctor",
    defaults={
        "full_name": "",
        "specialization": "",
        "email": "",
        "phone": "",
        "experience_years": 0,
        "qualification": "",
    },
    create_title="Add Doctor",
    create_action="Add",
)

PATIENT_FORM = FormDefinition(
    entity_label="Patient",
    defaults={
        "full_name": "",
        "email": "",
        "phone": "",
        "date_of_birth": "",
        "gender": "Male",
        "blood_group": "",
        "address": "",
        "emergency_contact": "",
    },
    create_title="Add Patient",
    create_action="Add",
)

APPOINTMENT_FORM = FormDefinition(
    entity_label="Appointment",
    defaults={
        "patient_id": "",
        "doctor_id": "",
        "appointment_date": "",
        "appointment_time": "",
        "status": "scheduled",
        "reason": "",
        "notes": "",
    },
    create_title="Schedule Appointment",
    create_action="Schedule",
)


@dataclass(frozen=True)
class FormState:
    phase: FormPhase = FormPhase.CLOSED
    mode: Optional[FormMode] = None
    target_id: Optional[str] = None
    draft: Optional[Draft] = None
    error: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.phase != FormPhase.CLOSED

    @property
    def is_submitting(self) -> bool:
        return self.phase == FormPhase.SUBMITTING


CLOSED = FormState()

Refresh = Callable[[], Awaitable[Any]]


class FormController:
    def __init__(self, definition: FormDefinition, repository: EntityRepository, on_saved: Optional[Refresh] = None):
        self.definition = definition
        self.repository = repository
        self.on_saved = on_saved
        self._state = CLOSED
        # Bumped on every open/cancel so a stale submit cannot touch a newer form
        self._generation = 0

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def title(self) -> str:
        if self._state.mode == FormMode.EDIT:
            return self.definition.edit_title
        return self.definition.create_title

    @property
    def submit_label(self) -> str:
        return "Update" if self._state.mode == FormMode.EDIT else self.definition.create_action

    def _open(self, mode: FormMode, draft: Draft, target_id: Optional[str] = None) -> FormState:
        if self._state.is_open:
            raise FormStateError(f"{self.definition.entity_label} form is already open")
        self._generation += 1
        self._state = FormState(phase=FormPhase.DRAFTING, mode=mode, target_id=target_id, draft=draft)
        return self._state

    def open_create(self) -> FormState:
        return self._open(FormMode.CREATE, self.definition.blank_draft())

    def open_edit(self, entity: Any) -> FormState:
        return self._open(FormMode.EDIT, self.definition.draft_from(entity), target_id=entity.id)

    def set_field(self, key: str, value: Any) -> FormState:
        if self._state.phase != FormPhase.DRAFTING:
            raise FormStateError(f"Cannot edit fields while the form is {self._state.phase.value}")
        self._state = replace(self._state, draft=self._state.draft.with_field(key, value))
        return self._state

    def cancel(self) -> FormState:
        # An in-flight write is not aborted; its outcome is simply ignored
        self._generation += 1
        self._state = CLOSED
        return self._state

    async def submit(self) -> Any:
        """Persist the draft. Returns the saved entity.

        On failure the form stays open with the draft intact, `state.error`
        carries the message and the exception propagates to the caller.
        """
        if self._state.phase == FormPhase.SUBMITTING:
            raise DuplicateSubmissionError(f"{self.definition.entity_label} form is already being submitted")
        if self._state.phase != FormPhase.DRAFTING:
            raise FormStateError("Cannot submit a closed form")

        drafting = replace(self._state, error=None)
        generation = self._generation
        self._state = replace(drafting, phase=FormPhase.SUBMITTING)
        payload = drafting.draft.as_dict()
        try:
            if drafting.mode == FormMode.EDIT:
                saved = await self.repository.update(drafting.target_id, payload)
            else:
                saved = await self.repository.create(payload)
        except Exception as e:
            message = e.message if isinstance(e, DashboardError) else str(e)
            logger.warning(f"Saving {self.definition.entity_label.lower()} failed: {message}")
            if generation == self._generation:
                self._state = replace(drafting, error=message)
            raise

        if generation == self._generation:
            self._state = CLOSED
        if self.on_saved is not None:
            await self.on_saved()
        return saved
