from dataclasses import dataclass, fields
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ..utils import as_utc


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Fields owned by the store; never part of a draft or patch
SERVER_FIELDS = ("id", "created_at", "updated_at")


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _as_datetime(value: Any) -> datetime:
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return as_utc(value)


@dataclass(frozen=True)
class Doctor:
    id: str
    full_name: str
    specialization: str
    email: str
    phone: str
    experience_years: int
    qualification: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Doctor":
        return cls(
            id=str(row["id"]),
            full_name=row["full_name"],
            specialization=row["specialization"],
            email=row["email"],
            phone=row["phone"],
            experience_years=int(row["experience_years"]),
            qualification=row["qualification"],
            created_at=_as_datetime(row["created_at"]),
            updated_at=_as_datetime(row["updated_at"]),
        )


@dataclass(frozen=True)
class Patient:
    id: str
    full_name: str
    email: str
    phone: str
    date_of_birth: date
    gender: str
    blood_group: Optional[str]
    address: Optional[str]
    emergency_contact: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Patient":
        return cls(
            id=str(row["id"]),
            full_name=row["full_name"],
            email=row["email"],
            phone=row["phone"],
            date_of_birth=_as_date(row["date_of_birth"]),
            gender=row["gender"],
            blood_group=row.get("blood_group"),
            address=row.get("address"),
            emergency_contact=row.get("emergency_contact"),
            created_at=_as_datetime(row["created_at"]),
            updated_at=_as_datetime(row["updated_at"]),
        )


@dataclass(frozen=True)
class Appointment:
    id: str
    patient_id: str
    doctor_id: str
    appointment_date: date
    appointment_time: str
    status: AppointmentStatus
    reason: str
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def _base_values(cls, row: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(
            id=str(row["id"]),
            patient_id=str(row["patient_id"]),
            doctor_id=str(row["doctor_id"]),
            appointment_date=_as_date(row["appointment_date"]),
            appointment_time=row["appointment_time"],
            status=AppointmentStatus(row["status"]),
            reason=row["reason"],
            notes=row.get("notes"),
            created_at=_as_datetime(row["created_at"]),
            updated_at=_as_datetime(row["updated_at"]),
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Appointment":
        return cls(**cls._base_values(row))


@dataclass(frozen=True)
class AppointmentWithRelations(Appointment):
    """Appointment plus read-time snapshots of the records it points at.

    Either snapshot is None when the referenced row no longer exists.
    """

    patient: Optional[Patient] = None
    doctor: Optional[Doctor] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AppointmentWithRelations":
        patient_row = row.get("patients")
        doctor_row = row.get("doctors")
        return cls(
            **cls._base_values(row),
            patient=Patient.from_row(patient_row) if patient_row else None,
            doctor=Doctor.from_row(doctor_row) if doctor_row else None,
        )

    def without_relations(self) -> Appointment:
        return Appointment(**{f.name: getattr(self, f.name) for f in fields(Appointment)})
