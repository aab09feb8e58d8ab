from ...schemas.doctors.doctor import DoctorCreate, DoctorUpdate
from ..entities import Doctor
from ..ports.store_client import Row, SortDirection
from .base import EntityRepository


class DoctorRepository(EntityRepository[Doctor]):
    collection = "doctors"
    default_order_by = "created_at"
    default_direction = SortDirection.DESC
    create_schema = DoctorCreate
    update_schema = DoctorUpdate

    def _to_entity(self, row: Row) -> Doctor:
        return Doctor.from_row(row)
