import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type

from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError, StatementError
from sqlmodel import Session, SQLModel, select
from starlette.concurrency import run_in_threadpool

from ...application.ports.store_client import Row, SortDirection, StoreClient, StoreResult
from ...db import models
from ...utils import as_utc, new_record_id, next_timestamp, utcnow

logger = logging.getLogger(__name__)

TABLES: Dict[str, Type[SQLModel]] = {
    "doctors": models.Doctor,
    "patients": models.Patient,
    "appointments": models.Appointment,
}

# collection -> relation name -> (related table, foreign key column on collection)
EMBEDS: Dict[str, Dict[str, Tuple[Type[SQLModel], str]]] = {
    "appointments": {
        "patients": (models.Patient, "patient_id"),
        "doctors": (models.Doctor, "doctor_id"),
    },
}

SERVER_COLUMNS = ("id", "created_at", "updated_at")


class SqlStoreClient(StoreClient):
    """Store client over SQLModel tables.

    Blocking database work runs on the threadpool so callers can await it.
    Every call uses its own session and commits on its own.
    """

    def __init__(self, engine: Engine, clock: Optional[Callable[[], Any]] = None):
        self.engine = engine
        self._clock = clock or utcnow

    async def list(self, collection: str, embed: Sequence[str] = (), order_by: Optional[str] = None, direction: SortDirection = SortDirection.DESC) -> StoreResult[List[Row]]:
        return await run_in_threadpool(self._list, collection, tuple(embed), order_by, direction)

    async def insert(self, collection: str, record: Row) -> StoreResult[Row]:
        return await run_in_threadpool(self._insert, collection, dict(record))

    async def update(self, collection: str, record_id: str, patch: Row) -> StoreResult[Row]:
        return await run_in_threadpool(self._update, collection, record_id, dict(patch))

    async def delete(self, collection: str, record_id: str) -> StoreResult[bool]:
        return await run_in_threadpool(self._delete, collection, record_id)

    def _table(self, collection: str) -> Optional[Type[SQLModel]]:
        return TABLES.get(collection)

    def _unknown_columns(self, table: Type[SQLModel], record: Row) -> List[str]:
        return sorted(key for key in record if key not in table.model_fields)

    def _list(self, collection: str, embed: Tuple[str, ...], order_by: Optional[str], direction: SortDirection) -> StoreResult[List[Row]]:
        table = self._table(collection)
        if table is None:
            return StoreResult.failure("invalid_request", f"Unknown collection '{collection}'")
        relations = EMBEDS.get(collection, {})
        unknown = [name for name in embed if name not in relations]
        if unknown:
            return StoreResult.failure("invalid_request", f"Cannot embed {unknown} in {collection}")
        order_by = order_by or "created_at"
        if order_by not in table.model_fields:
            return StoreResult.failure("invalid_request", f"Unknown column '{order_by}' on {collection}")

        related = [relations[name] for name in embed]
        stmt = select(table, *[target for target, _ in related])
        for target, fk in related:
            stmt = stmt.outerjoin(target, target.id == getattr(table, fk))
        column = getattr(table, order_by)
        stmt = stmt.order_by(column.desc() if direction == SortDirection.DESC else column.asc())
        # Fixed tie-break so equal sort keys come back in the same order every time
        stmt = stmt.order_by(table.created_at.asc(), table.id.asc())

        try:
            with Session(self.engine) as session:
                results = session.exec(stmt).all()
                rows = []
                for result in results:
                    if not related:
                        rows.append(result.model_dump())
                        continue
                    main, *others = result
                    row = main.model_dump()
                    for name, other in zip(embed, others):
                        row[name] = other.model_dump() if other is not None else None
                    rows.append(row)
        except SQLAlchemyError as e:
            logger.error(f"Error listing {collection}: {e}")
            return StoreResult.failure("unavailable", str(e))
        return StoreResult.success(rows)

    def _insert(self, collection: str, record: Row) -> StoreResult[Row]:
        table = self._table(collection)
        if table is None:
            return StoreResult.failure("invalid_request", f"Unknown collection '{collection}'")
        for key in SERVER_COLUMNS:
            record.pop(key, None)
        unknown = self._unknown_columns(table, record)
        if unknown:
            return StoreResult.failure("invalid_request", f"Unknown columns for {collection}: {unknown}")

        now = as_utc(self._clock())
        obj = table(**record, id=new_record_id(), created_at=now, updated_at=now)
        try:
            with Session(self.engine) as session:
                session.add(obj)
                session.commit()
                session.refresh(obj)
                return StoreResult.success(obj.model_dump())
        except IntegrityError as e:
            logger.error(f"Constraint violation inserting into {collection}: {e}")
            return StoreResult.failure("constraint", str(e.orig))
        except DBAPIError as e:
            logger.error(f"Database error inserting into {collection}: {e}")
            return StoreResult.failure("unavailable", str(e))
        except StatementError as e:
            logger.error(f"Rejected insert into {collection}: {e}")
            return StoreResult.failure("invalid_request", str(e))
        except SQLAlchemyError as e:
            logger.error(f"Error inserting into {collection}: {e}")
            return StoreResult.failure("unavailable", str(e))

    def _update(self, collection: str, record_id: str, patch: Row) -> StoreResult[Row]:
        table = self._table(collection)
        if table is None:
            return StoreResult.failure("invalid_request", f"Unknown collection '{collection}'")
        for key in SERVER_COLUMNS:
            patch.pop(key, None)
        unknown = self._unknown_columns(table, patch)
        if unknown:
            return StoreResult.failure("invalid_request", f"Unknown columns for {collection}: {unknown}")

        try:
            with Session(self.engine) as session:
                obj = session.get(table, record_id)
                if obj is None:
                    return StoreResult.failure("not_found", f"No {collection} record with id {record_id}")
                for key, value in patch.items():
                    setattr(obj, key, value)
                obj.updated_at = next_timestamp(self._clock(), obj.updated_at)
                session.add(obj)
                session.commit()
                session.refresh(obj)
                return StoreResult.success(obj.model_dump())
        except IntegrityError as e:
            logger.error(f"Constraint violation updating {collection} {record_id}: {e}")
            return StoreResult.failure("constraint", str(e.orig))
        except DBAPIError as e:
            logger.error(f"Database error updating {collection} {record_id}: {e}")
            return StoreResult.failure("unavailable", str(e))
        except StatementError as e:
            logger.error(f"Rejected update of {collection} {record_id}: {e}")
            return StoreResult.failure("invalid_request", str(e))
        except SQLAlchemyError as e:
            logger.error(f"Error updating {collection} {record_id}: {e}")
            return StoreResult.failure("unavailable", str(e))

    def _delete(self, collection: str, record_id: str) -> StoreResult[bool]:
        table = self._table(collection)
        if table is None:
            return StoreResult.failure("invalid_request", f"Unknown collection '{collection}'")
        try:
            with Session(self.engine) as session:
                obj = session.get(table, record_id)
                if obj is None:
                    return StoreResult.failure("not_found", f"No {collection} record with id {record_id}")
                session.delete(obj)
                session.commit()
                return StoreResult.success(True)
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {collection} {record_id}: {e}")
            return StoreResult.failure("unavailable", str(e))
