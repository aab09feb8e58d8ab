from dataclasses import asdict
from typing import List
from fastapi import APIRouter, Depends, HTTPException
import logging

from ..application.entities import Appointment
from ..application.repositories import AppointmentRepository
from ..application.services.list_view import present_status
from ..exceptions import DashboardError
from ..schemas.common.common import ErrorResponse
from ..schemas.appointments.appointment import AppointmentCreate, AppointmentResponse, AppointmentUpdate
from .deletion_routes import add_deletion_routes
from .dependencies import get_appointment_repository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/appointments",
    tags=["Appointments"],
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)


def _to_response(appointment: Appointment) -> dict:
    body = asdict(appointment)
    body["presentation"] = asdict(present_status(appointment.status))
    return body


@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(repo: AppointmentRepository = Depends(get_appointment_repository)):
    """Newest appointment date first, with patient and doctor snapshots (null when gone)"""
    try:
        return [_to_response(a) for a in await repo.list_with_relations()]
    except DashboardError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving appointments: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve appointments")


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(body: AppointmentCreate, repo: AppointmentRepository = Depends(get_appointment_repository)):
    try:
        return _to_response(await repo.create(body.model_dump()))
    except DashboardError:
        raise
    except Exception as e:
        logger.error(f"Error scheduling appointment: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to schedule appointment")


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(appointment_id: str, body: AppointmentUpdate, repo: AppointmentRepository = Depends(get_appointment_repository)):
    try:
        return _to_response(await repo.update(appointment_id, body.model_dump(exclude_unset=True)))
    except DashboardError:
        raise
    except Exception as e:
        logger.error(f"Error updating appointment {appointment_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to update appointment")


add_deletion_routes(router, "appointments")
