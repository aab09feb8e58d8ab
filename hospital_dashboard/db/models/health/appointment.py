# hospital_dashboard/db/models/health/appointment.py
from typing import Optional
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field
from datetime import date, datetime

from ....utils import utcnow

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: str = Field(primary_key=True, max_length=36)
    # Plain columns: deleting a patient or doctor leaves the appointment orphaned
    patient_id: str = Field(index=True)
    doctor_id: str = Field(index=True)
    appointment_date: date = Field(index=True)
    appointment_time: str
    status: str = Field(default="scheduled")
    reason: str
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
