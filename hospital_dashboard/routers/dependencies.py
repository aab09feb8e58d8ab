from fastapi import Depends, Request

from ..application.ports.store_client import StoreClient
from ..application.repositories import AppointmentRepository, DoctorRepository, PatientRepository
from ..application.services.deletion import DeletionProtocol


def get_store_client(request: Request) -> StoreClient:
    return request.app.state.store_client


def get_doctor_repository(client: StoreClient = Depends(get_store_client)) -> DoctorRepository:
    return DoctorRepository(client)


def get_patient_repository(client: StoreClient = Depends(get_store_client)) -> PatientRepository:
    return PatientRepository(client)


def get_appointment_repository(client: StoreClient = Depends(get_store_client)) -> AppointmentRepository:
    return AppointmentRepository(client)


def get_deletion_protocol(collection: str):
    """Dependency factory; pending confirmations live on the app for its lifetime"""
    def _get(request: Request) -> DeletionProtocol:
        return request.app.state.deletions[collection]
    return _get
