# hospital_dashboard/db/models/health/doctor.py
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field
from datetime import datetime

from ....utils import utcnow

class Doctor(SQLModel, table=True):
    __tablename__ = "doctors"
    id: str = Field(primary_key=True, max_length=36)
    full_name: str
    specialization: str
    email: str
    phone: str
    experience_years: int = Field(default=0)
    qualification: str
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False, index=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
