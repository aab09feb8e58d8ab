import logging
from typing import Any, Callable, Generic, List, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ...exceptions import StoreError, ValidationError, store_error_from
from ..ports.store_client import Row, SortDirection, StoreClient, StoreResult

logger = logging.getLogger(__name__)

E = TypeVar("E")
D = TypeVar("D")


def shape_payload(schema: Type[BaseModel], data: Mapping[str, Any], partial: bool = False) -> Row:
    """Validate a draft or patch and coerce it into store types.

    Raises ValidationError listing every failing field; nothing reaches the
    store when this fails.
    """
    try:
        model = schema.model_validate(dict(data))
    except PydanticValidationError as e:
        fields = {}
        for err in e.errors():
            key = ".".join(str(part) for part in err["loc"]) or "payload"
            fields[key] = err["msg"]
        raise ValidationError(f"Missing or invalid fields: {', '.join(sorted(fields))}", fields)
    return model.model_dump(exclude_unset=partial)


class EntityRepository(Generic[E]):
    """Entity-specific access to one store collection.

    The repository keeps no cache. After a successful create, update or delete
    callers are expected to list again to pick up server-computed fields.
    """

    collection: str = ""
    default_order_by: str = "created_at"
    default_direction: SortDirection = SortDirection.DESC
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]

    def __init__(self, client: StoreClient):
        self.client = client

    def _to_entity(self, row: Row) -> E:
        raise NotImplementedError

    def _unwrap(self, result: StoreResult, action: str) -> Any:
        if result.error is not None:
            logger.error(f"Store {action} on {self.collection} failed: [{result.error.code}] {result.error.message}")
            raise store_error_from(result.error.code, result.error.message)
        return result.data

    async def _fetch(self, order_by: Optional[str], direction: Optional[SortDirection], embed: Sequence[str], convert: Callable[[Row], D]) -> List[D]:
        result = await self.client.list(
            self.collection,
            embed=tuple(embed),
            order_by=order_by or self.default_order_by,
            direction=direction or self.default_direction,
        )
        rows = self._unwrap(result, "list")
        return [convert(row) for row in rows or []]

    async def list(self, order_by: Optional[str] = None, direction: Optional[SortDirection] = None, embed: Sequence[str] = ()) -> List[E]:
        return await self._fetch(order_by, direction, embed, self._to_entity)

    async def create(self, draft: Mapping[str, Any]) -> E:
        payload = shape_payload(self.create_schema, draft)
        row = self._unwrap(await self.client.insert(self.collection, payload), "insert")
        entity = self._to_entity(row)
        logger.info(f"Created {self.collection} record {getattr(entity, 'id', '?')}")
        return entity

    async def update(self, record_id: str, patch: Mapping[str, Any]) -> E:
        payload = shape_payload(self.update_schema, patch, partial=True)
        row = self._unwrap(await self.client.update(self.collection, record_id, payload), "update")
        if row is None:
            raise StoreError(f"Store returned no row for {self.collection} {record_id}")
        logger.info(f"Updated {self.collection} record {record_id}: {sorted(payload)}")
        return self._to_entity(row)

    async def delete(self, record_id: str) -> None:
        self._unwrap(await self.client.delete(self.collection, record_id), "delete")
        logger.info(f"Deleted {self.collection} record {record_id}")
