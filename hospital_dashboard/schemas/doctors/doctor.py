# hospital_dashboard/schemas/doctors/doctor.py
from pydantic import Field
from typing import Optional

from ..common.common import DraftModel, PatchModel, RecordResponse

class DoctorCreate(DraftModel):
    full_name: str = Field(min_length=1)
    specialization: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    experience_years: int = Field(ge=0)
    qualification: str = Field(min_length=1)

class DoctorUpdate(PatchModel):
    full_name: Optional[str] = Field(default=None, min_length=1)
    specialization: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, min_length=1)
    experience_years: Optional[int] = Field(default=None, ge=0)
    qualification: Optional[str] = Field(default=None, min_length=1)

class DoctorResponse(RecordResponse):
    full_name: str
    specialization: str
    email: str
    phone: str
    experience_years: int
    qualification: str
