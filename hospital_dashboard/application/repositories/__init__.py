from .base import EntityRepository, shape_payload
from .doctors import DoctorRepository
from .patients import PatientRepository
from .appointments import AppointmentRepository, RELATIONS

__all__ = [
    "EntityRepository",
    "shape_payload",
    "DoctorRepository",
    "PatientRepository",
    "AppointmentRepository",
    "RELATIONS",
]
