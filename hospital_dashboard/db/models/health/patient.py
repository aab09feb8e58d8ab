# hospital_dashboard/db/models/health/patient.py
from typing import Optional
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field
from datetime import date, datetime

from ....utils import utcnow

class Patient(SQLModel, table=True):
    __tablename__ = "patients"
    id: str = Field(primary_key=True, max_length=36)
    full_name: str
    email: str
    phone: str
    date_of_birth: date
    gender: str
    blood_group: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False, index=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
