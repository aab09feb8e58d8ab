from copy import deepcopy
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ...application.ports.store_client import Row, SortDirection, StoreClient, StoreResult
from ...utils import as_utc, new_record_id, next_timestamp, utcnow

COLLECTIONS = ("doctors", "patients", "appointments")

# collection -> relation name -> foreign key column on collection
EMBEDS: Dict[str, Dict[str, str]] = {
    "appointments": {"patients": "patient_id", "doctors": "doctor_id"},
}

# Column defaults the store fills in when an insert omits them
DEFAULTS: Dict[str, Row] = {
    "doctors": {"experience_years": 0},
    "patients": {"blood_group": None, "address": None, "emergency_contact": None},
    "appointments": {"status": "scheduled", "notes": None},
}

SERVER_COLUMNS = ("id", "created_at", "updated_at")

# Columns each collection can be ordered by, mirroring the SQL tables
COLUMNS: Dict[str, Tuple[str, ...]] = {
    "doctors": SERVER_COLUMNS + ("full_name", "specialization", "email", "phone", "experience_years", "qualification"),
    "patients": SERVER_COLUMNS + ("full_name", "email", "phone", "date_of_birth", "gender", "blood_group", "address", "emergency_contact"),
    "appointments": SERVER_COLUMNS + ("patient_id", "doctor_id", "appointment_date", "appointment_time", "status", "reason", "notes"),
}


class InMemoryStoreClient(StoreClient):
    """Process-local store with the same contract as the SQL client.

    Rows are copied on the way in and out, so callers never hold live
    references into the store.
    """

    def __init__(self, clock: Optional[Callable[[], Any]] = None) -> None:
        self._tables: Dict[str, Dict[str, Row]] = {name: {} for name in COLLECTIONS}
        self._clock = clock or utcnow

    def _missing(self, collection: str) -> StoreResult:
        return StoreResult.failure("invalid_request", f"Unknown collection '{collection}'")

    async def list(self, collection: str, embed: Sequence[str] = (), order_by: Optional[str] = None, direction: SortDirection = SortDirection.DESC) -> StoreResult[List[Row]]:
        table = self._tables.get(collection)
        if table is None:
            return self._missing(collection)
        relations = EMBEDS.get(collection, {})
        unknown = [name for name in embed if name not in relations]
        if unknown:
            return StoreResult.failure("invalid_request", f"Cannot embed {unknown} in {collection}")
        order_by = order_by or "created_at"
        if order_by not in COLUMNS[collection]:
            return StoreResult.failure("invalid_request", f"Unknown column '{order_by}' on {collection}")
        rows = list(table.values())

        # sorted() is stable: equal keys keep insertion order on every call
        rows = sorted(rows, key=lambda row: (row.get(order_by) is None, row.get(order_by)), reverse=direction == SortDirection.DESC)
        out = []
        for row in rows:
            item = deepcopy(row)
            for name in embed:
                target = self._tables[name].get(row.get(relations[name]))
                item[name] = deepcopy(target) if target is not None else None
            out.append(item)
        return StoreResult.success(out)

    async def insert(self, collection: str, record: Row) -> StoreResult[Row]:
        table = self._tables.get(collection)
        if table is None:
            return self._missing(collection)
        now = as_utc(self._clock())
        row = dict(DEFAULTS.get(collection, {}))
        row.update({k: deepcopy(v) for k, v in record.items() if k not in SERVER_COLUMNS})
        row.update(id=new_record_id(), created_at=now, updated_at=now)
        table[row["id"]] = row
        return StoreResult.success(deepcopy(row))

    async def update(self, collection: str, record_id: str, patch: Row) -> StoreResult[Row]:
        table = self._tables.get(collection)
        if table is None:
            return self._missing(collection)
        row = table.get(record_id)
        if row is None:
            return StoreResult.failure("not_found", f"No {collection} record with id {record_id}")
        row.update({k: deepcopy(v) for k, v in patch.items() if k not in SERVER_COLUMNS})
        row["updated_at"] = next_timestamp(self._clock(), row["updated_at"])
        return StoreResult.success(deepcopy(row))

    async def delete(self, collection: str, record_id: str) -> StoreResult[bool]:
        table = self._tables.get(collection)
        if table is None:
            return self._missing(collection)
        if table.pop(record_id, None) is None:
            return StoreResult.failure("not_found", f"No {collection} record with id {record_id}")
        return StoreResult.success(True)
