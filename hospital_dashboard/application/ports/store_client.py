from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")

Row = Dict[str, Any]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class StoreFailure:
    code: str
    message: str


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Result pair returned by every store call. Check `error` before `data`."""

    data: Optional[T] = None
    error: Optional[StoreFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> "StoreResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, code: str, message: str) -> "StoreResult[T]":
        return cls(error=StoreFailure(code=code, message=message))


class StoreClient(Protocol):
    async def list(self, collection: str, embed: Sequence[str] = (), order_by: Optional[str] = None, direction: SortDirection = SortDirection.DESC) -> StoreResult[List[Row]]:
        ...

    async def insert(self, collection: str, record: Row) -> StoreResult[Row]:
        ...

    async def update(self, collection: str, record_id: str, patch: Row) -> StoreResult[Row]:
        ...

    async def delete(self, collection: str, record_id: str) -> StoreResult[bool]:
        ...
