from dataclasses import asdict
from typing import List
from fastapi import APIRouter, Depends, HTTPException
import logging

from ..application.repositories import PatientRepository
from ..exceptions import DashboardError
from ..schemas.common.common import ErrorResponse
from ..schemas.patients.patient import PatientCreate, PatientResponse, PatientUpdate
from .deletion_routes import add_deletion_routes
from .dependencies import get_patient_repository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/patients",
    tags=["Patients"],
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)


@router.get("", response_model=List[PatientResponse])
async def list_patients(repo: PatientRepository = Depends(get_patient_repository)):
    try:
        return [asdict(p) for p in await repo.list()]
    except DashboardError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving patients: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve patients")


@router.post("", response_model=PatientResponse, status_code=201)
async def create_patient(body: PatientCreate, repo: PatientRepository = Depends(get_patient_repository)):
    try:
        return asdict(await repo.create(body.model_dump()))
    except DashboardError:
        raise
    except Exception as e:
        logger.error(f"Error creating patient: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to create patient")


@router.patch("/{patient_id}", response_model=PatientResponse)
async def update_patient(patient_id: str, body: PatientUpdate, repo: PatientRepository = Depends(get_patient_repository)):
    try:
        return asdict(await repo.update(patient_id, body.model_dump(exclude_unset=True)))
    except DashboardError:
        raise
    except Exception as e:
        logger.error(f"Error updating patient {patient_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to update patient")


add_deletion_routes(router, "patients")
