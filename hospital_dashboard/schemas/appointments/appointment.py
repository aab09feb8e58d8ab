# hospital_dashboard/schemas/appointments/appointment.py
from pydantic import BaseModel, Field
from typing import ClassVar, Optional, Tuple
from datetime import date

from ...application.entities import AppointmentStatus
from ..common.common import DraftModel, PatchModel, RecordResponse
from ..doctors.doctor import DoctorResponse
from ..patients.patient import PatientResponse

class AppointmentCreate(DraftModel):
    patient_id: str = Field(min_length=1)
    doctor_id: str = Field(min_length=1)
    appointment_date: date
    appointment_time: str = Field(min_length=1)  # HH:MM
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED, validate_default=True)
    reason: str = Field(min_length=1)
    notes: Optional[str] = None

class AppointmentUpdate(PatchModel):
    nullable_fields: ClassVar[Tuple[str, ...]] = ("notes",)

    patient_id: Optional[str] = Field(default=None, min_length=1)
    doctor_id: Optional[str] = Field(default=None, min_length=1)
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = Field(default=None, min_length=1)
    status: Optional[AppointmentStatus] = None
    reason: Optional[str] = Field(default=None, min_length=1)
    notes: Optional[str] = None

class StatusPresentationResponse(BaseModel):
    category: str
    icon: str
    color_class: str

class AppointmentResponse(RecordResponse):
    patient_id: str
    doctor_id: str
    appointment_date: date
    appointment_time: str
    status: AppointmentStatus
    reason: str
    notes: Optional[str] = None
    patient: Optional[PatientResponse] = None
    doctor: Optional[DoctorResponse] = None
    presentation: Optional[StatusPresentationResponse] = None
