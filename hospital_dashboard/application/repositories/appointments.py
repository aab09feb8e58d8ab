from typing import List, Optional, Sequence

from ...schemas.appointments.appointment import AppointmentCreate, AppointmentUpdate
from ..entities import Appointment, AppointmentWithRelations
from ..ports.store_client import Row, SortDirection
from .base import EntityRepository

# Relation names the store nests under each appointment row
RELATIONS = ("patients", "doctors")


class AppointmentRepository(EntityRepository[Appointment]):
    collection = "appointments"
    default_order_by = "appointment_date"
    default_direction = SortDirection.DESC
    create_schema = AppointmentCreate
    update_schema = AppointmentUpdate

    def _to_entity(self, row: Row) -> Appointment:
        return Appointment.from_row(row)

    async def list(self, order_by: Optional[str] = None, direction: Optional[SortDirection] = None, embed: Sequence[str] = ()) -> List[Appointment]:
        # Embedded rows keep their snapshots; a relation not requested stays None
        convert = AppointmentWithRelations.from_row if embed else self._to_entity
        return await self._fetch(order_by, direction, embed, convert)

    async def list_with_relations(self) -> List[AppointmentWithRelations]:
        """Appointments newest date first, each with patient and doctor snapshots.

        A snapshot whose referenced record is gone comes back as None instead of
        failing the fetch.
        """
        return await self.list(embed=RELATIONS)
