from ...schemas.patients.patient import PatientCreate, PatientUpdate
from ..entities import Patient
from ..ports.store_client import Row, SortDirection
from .base import EntityRepository


class PatientRepository(EntityRepository[Patient]):
    collection = "patients"
    default_order_by = "created_at"
    default_direction = SortDirection.DESC
    create_schema = PatientCreate
    update_schema = PatientUpdate

    def _to_entity(self, row: Row) -> Patient:
        return Patient.from_row(row)
