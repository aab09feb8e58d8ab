import asyncio
import logging
from dataclasses import dataclass
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar

from ...exceptions import DashboardError, NotFoundError
from ..entities import AppointmentWithRelations, Doctor, Patient
from ..repositories import AppointmentRepository, DoctorRepository, EntityRepository, PatientRepository
from .deletion import DeletionProtocol
from .form_controller import APPOINTMENT_FORM, DOCTOR_FORM, PATIENT_FORM, FormController, FormDefinition, FormState
from .list_view import ListView, build_list_view

logger = logging.getLogger(__name__)

E = TypeVar("E")


class EntityModule(Generic[E]):
    """One management screen: cached list, form and delete protocol for a kind.

    The cache is only ever replaced as a whole, after a successful list.
    """

    def __init__(self, repository: EntityRepository, definition: FormDefinition, delete_ttl_seconds: Optional[int] = None):
        self.repository = repository
        self.collection = repository.collection
        self.loading = False
        self.error: Optional[str] = None
        self._records: Tuple[E, ...] = ()
        self._refresh_seq = 0
        self.form = FormController(definition, repository, on_saved=self.refresh)
        self.deletion = DeletionProtocol(repository, definition.entity_label, on_deleted=self.refresh, ttl_seconds=delete_ttl_seconds)

    @property
    def records(self) -> Tuple[E, ...]:
        return self._records

    def find(self, record_id: str) -> Optional[E]:
        return next((r for r in self._records if getattr(r, "id", None) == record_id), None)

    async def _load(self) -> Sequence[E]:
        return await self.repository.list()

    async def refresh(self) -> Tuple[E, ...]:
        self._refresh_seq += 1
        seq = self._refresh_seq
        self.loading = True
        try:
            records = await self._load()
        except DashboardError as e:
            if seq == self._refresh_seq:
                self.error = e.message
            logger.error(f"Refreshing {self.collection} failed: {e.message}")
            raise
        finally:
            if seq == self._refresh_seq:
                self.loading = False
        # An older refresh finishing late must not overwrite a newer one
        if seq == self._refresh_seq:
            self._records = tuple(records)
            self.error = None
        return self._records

    def view(self) -> ListView:
        return build_list_view(self.collection, self._records, loading=self.loading, error=self.error)

    def open_create(self) -> FormState:
        return self.form.open_create()

    def open_edit(self, record_id: str) -> FormState:
        record = self.find(record_id)
        if record is None:
            raise NotFoundError(f"No {self.collection} record with id {record_id} in the current list")
        return self.form.open_edit(record)


class DoctorsModule(EntityModule[Doctor]):
    def __init__(self, repository: DoctorRepository, delete_ttl_seconds: Optional[int] = None):
        super().__init__(repository, DOCTOR_FORM, delete_ttl_seconds)


class PatientsModule(EntityModule[Patient]):
    def __init__(self, repository: PatientRepository, delete_ttl_seconds: Optional[int] = None):
        super().__init__(repository, PATIENT_FORM, delete_ttl_seconds)


@dataclass(frozen=True)
class Option:
    value: str
    label: str


class AppointmentsModule(EntityModule[AppointmentWithRelations]):
    """Appointments screen; also keeps the patient and doctor picker options"""

    def __init__(self, repository: AppointmentRepository, patients: PatientRepository, doctors: DoctorRepository, delete_ttl_seconds: Optional[int] = None):
        super().__init__(repository, APPOINTMENT_FORM, delete_ttl_seconds)
        self.patients = patients
        self.doctors = doctors
        self.patient_options: Tuple[Option, ...] = ()
        self.doctor_options: Tuple[Option, ...] = ()
        self.options_error: Optional[str] = None

    async def _load(self) -> List[AppointmentWithRelations]:
        appointments, patients, doctors = await asyncio.gather(
            self.repository.list_with_relations(),
            self.patients.list(),
            self.doctors.list(),
            return_exceptions=True,
        )
        # A failed picker fetch keeps the previous options and does not fail the list
        self.options_error = None
        if isinstance(patients, BaseException):
            self._picker_failed("patients", patients)
        else:
            self.patient_options = tuple(Option(p.id, p.full_name) for p in patients)
        if isinstance(doctors, BaseException):
            self._picker_failed("doctors", doctors)
        else:
            self.doctor_options = tuple(Option(d.id, f"{d.full_name} - {d.specialization}") for d in doctors)
        if isinstance(appointments, BaseException):
            raise appointments
        return appointments

    def _picker_failed(self, collection: str, error: BaseException) -> None:
        if not isinstance(error, DashboardError):
            raise error
        logger.warning(f"Loading {collection} options failed: {error.message}")
        self.options_error = error.message
