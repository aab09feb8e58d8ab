# hospital_dashboard/schemas/patients/patient.py
from pydantic import Field
from typing import ClassVar, Optional, Tuple
from datetime import date

from ..common.common import DraftModel, PatchModel, RecordResponse

class PatientCreate(DraftModel):
    full_name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    date_of_birth: date
    gender: str = Field(min_length=1)
    blood_group: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None

class PatientUpdate(PatchModel):
    nullable_fields: ClassVar[Tuple[str, ...]] = ("blood_group", "address", "emergency_contact")

    full_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, min_length=1)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(default=None, min_length=1)
    blood_group: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None

class PatientResponse(RecordResponse):
    full_name: str
    email: str
    phone: str
    date_of_birth: date
    gender: str
    blood_group: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
