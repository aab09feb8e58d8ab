from dataclasses import asdict
from typing import List
from fastapi import APIRouter, Depends, HTTPException
import logging

from ..application.repositories import DoctorRepository
from ..exceptions import DashboardError
from ..schemas.common.common import ErrorResponse
from ..schemas.doctors.doctor import DoctorCreate, DoctorResponse, DoctorUpdate
from .deletion_routes import add_deletion_routes
from .dependencies import get_doctor_repository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/doctors",
    tags=["Doctors"],
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)


@router.get("", response_model=List[DoctorResponse])
async def list_doctors(repo: DoctorRepository = Depends(get_doctor_repository)):
    try:
        return [asdict(d) for d in await repo.list()]
    except DashboardError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving doctors: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve doctors")


@router.post("", response_model=DoctorResponse, status_code=201)
async def create_doctor(body: DoctorCreate, repo: DoctorRepository = Depends(get_doctor_repository)):
    try:
        return asdict(await repo.create(body.model_dump()))
    except DashboardError:
        raise
    except Exception as e:
        logger.error(f"Error creating doctor: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to create doctor")


@router.patch("/{doctor_id}", response_model=DoctorResponse)
async def update_doctor(doctor_id: str, body: DoctorUpdate, repo: DoctorRepository = Depends(get_doctor_repository)):
    try:
        return asdict(await repo.update(doctor_id, body.model_dump(exclude_unset=True)))
    except DashboardError:
        raise
    except Exception as e:
        logger.error(f"Error updating doctor {doctor_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to update doctor")


add_deletion_routes(router, "doctors")
