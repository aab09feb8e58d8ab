"""Display summaries derived from repository state. Pure functions, no storage."""
from dataclasses import dataclass
from datetime import date
from typing import Generic, Mapping, Optional, Sequence, Tuple, TypeVar

from ..entities import AppointmentStatus, AppointmentWithRelations, Doctor, Patient

S = TypeVar("S")


@dataclass(frozen=True)
class StatusPresentation:
    category: str
    icon: str
    color_class: str


STATUS_PRESENTATION: Mapping[AppointmentStatus, StatusPresentation] = {
    AppointmentStatus.SCHEDULED: StatusPresentation("pending", "clock", "bg-orange-50 text-orange-700 border-orange-200"),
    AppointmentStatus.COMPLETED: StatusPresentation("success", "check-circle", "bg-green-50 text-green-700 border-green-200"),
    AppointmentStatus.CANCELLED: StatusPresentation("failed", "x-circle", "bg-red-50 text-red-700 border-red-200"),
}

if set(STATUS_PRESENTATION) != set(AppointmentStatus):
    raise RuntimeError("STATUS_PRESENTATION must cover every AppointmentStatus exactly once")

UNKNOWN_PATIENT = "Unknown patient"
UNKNOWN_DOCTOR = "Unknown doctor"

EMPTY_MESSAGES = {
    "doctors": "No doctors found. Add your first doctor!",
    "patients": "No patients found. Add your first patient!",
    "appointments": "No appointments found. Schedule your first appointment!",
}

LOADING_MESSAGES = {
    "doctors": "Loading doctors...",
    "patients": "Loading patients...",
    "appointments": "Loading appointments...",
}


def present_status(status: AppointmentStatus) -> StatusPresentation:
    return STATUS_PRESENTATION[AppointmentStatus(status)]


def format_date(value: date) -> str:
    """M/D/YYYY, as the dashboard has always shown dates"""
    return f"{value.month}/{value.day}/{value.year}"


@dataclass(frozen=True)
class DoctorSummary:
    id: str
    title: str
    subtitle: str
    email: str
    phone: str
    experience: str
    qualification: str


@dataclass(frozen=True)
class PatientSummary:
    id: str
    title: str
    subtitle: str
    email: str
    phone: str
    date_of_birth: str
    blood_group: Optional[str]


@dataclass(frozen=True)
class AppointmentSummary:
    id: str
    patient_name: str
    doctor_name: str
    doctor_specialization: str
    scheduled_for: str
    reason: str
    notes: Optional[str]
    status: AppointmentStatus
    presentation: StatusPresentation


def summarize_doctor(doctor: Doctor) -> DoctorSummary:
    return DoctorSummary(
        id=doctor.id,
        title=doctor.full_name,
        subtitle=doctor.specialization,
        email=doctor.email,
        phone=doctor.phone,
        experience=f"{doctor.experience_years} years experience",
        qualification=doctor.qualification,
    )


def summarize_patient(patient: Patient) -> PatientSummary:
    return PatientSummary(
        id=patient.id,
        title=patient.full_name,
        subtitle=patient.gender,
        email=patient.email,
        phone=patient.phone,
        date_of_birth=f"DOB: {format_date(patient.date_of_birth)}",
        blood_group=f"Blood: {patient.blood_group}" if patient.blood_group else None,
    )


def summarize_appointment(appointment: AppointmentWithRelations) -> AppointmentSummary:
    patient, doctor = appointment.patient, appointment.doctor
    return AppointmentSummary(
        id=appointment.id,
        patient_name=patient.full_name if patient else UNKNOWN_PATIENT,
        doctor_name=doctor.full_name if doctor else UNKNOWN_DOCTOR,
        doctor_specialization=doctor.specialization if doctor else "",
        scheduled_for=f"{format_date(appointment.appointment_date)} at {appointment.appointment_time}",
        reason=f"Reason: {appointment.reason}",
        notes=f"Notes: {appointment.notes}" if appointment.notes else None,
        status=appointment.status,
        presentation=present_status(appointment.status),
    )


@dataclass(frozen=True)
class ListView(Generic[S]):
    loading: bool
    items: Tuple[S, ...]
    empty_message: str
    loading_message: str
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.loading and not self.items


SUMMARIZERS = {
    "doctors": summarize_doctor,
    "patients": summarize_patient,
    "appointments": summarize_appointment,
}


def build_list_view(collection: str, records: Sequence, loading: bool = False, error: Optional[str] = None) -> ListView:
    summarize = SUMMARIZERS[collection]
    return ListView(
        loading=loading,
        items=tuple(summarize(record) for record in records),
        empty_message=EMPTY_MESSAGES[collection],
        loading_message=LOADING_MESSAGES[collection],
        error=error,
    )
