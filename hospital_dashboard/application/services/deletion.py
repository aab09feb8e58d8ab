import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ...core.config import settings
from ...exceptions import ConfirmationError
from ...utils import utcnow
from ..repositories.base import EntityRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeletionRequest:
    token: str
    collection: str
    record_id: str
    prompt: str
    requested_at: datetime
    expires_at: datetime


class DeletionProtocol:
    """Request -> confirm -> commit.

    `request` only records intent. Nothing reaches the store until `confirm`
    is called with the returned token. Tokens are single use: a token is
    consumed before the delete is issued, so a failed delete needs a new
    request.
    """

    def __init__(self, repository: EntityRepository, entity_label: str, on_deleted: Optional[Callable[[], Awaitable[Any]]] = None, ttl_seconds: Optional[int] = None, clock: Callable[[], datetime] = utcnow):
        self.repository = repository
        self.entity_label = entity_label
        self.on_deleted = on_deleted
        self.ttl = timedelta(seconds=ttl_seconds if ttl_seconds is not None else settings.DELETE_CONFIRMATION_TTL_SECONDS)
        self._clock = clock
        self._pending: Dict[str, DeletionRequest] = {}

    def _purge_expired(self, now: datetime) -> None:
        self._pending = {t: r for t, r in self._pending.items() if r.expires_at >= now}

    def request(self, record_id: str) -> DeletionRequest:
        now = self._clock()
        self._purge_expired(now)
        req = DeletionRequest(
            token=secrets.token_urlsafe(16),
            collection=self.repository.collection,
            record_id=record_id,
            prompt=f"Are you sure you want to delete this {self.entity_label.lower()}?",
            requested_at=now,
            expires_at=now + self.ttl,
        )
        self._pending[req.token] = req
        return req

    def pending(self) -> List[DeletionRequest]:
        self._purge_expired(self._clock())
        return list(self._pending.values())

    def _take(self, token: str, record_id: Optional[str] = None) -> DeletionRequest:
        req = self._pending.get(token)
        if req is None:
            raise ConfirmationError("Unknown or already used deletion confirmation")
        if record_id is not None and req.record_id != record_id:
            raise ConfirmationError("Deletion confirmation does not match this record")
        del self._pending[token]
        if self._clock() > req.expires_at:
            raise ConfirmationError("Deletion confirmation has expired")
        return req

    def decline(self, token: str) -> DeletionRequest:
        req = self._pending.pop(token, None)
        if req is None:
            raise ConfirmationError("Unknown or already used deletion confirmation")
        return req

    async def confirm(self, token: str, record_id: Optional[str] = None) -> DeletionRequest:
        req = self._take(token, record_id)
        await self.repository.delete(req.record_id)
        logger.info(f"Confirmed deletion of {req.collection} record {req.record_id}")
        if self.on_deleted is not None:
            await self.on_deleted()
        return req

    async def request_delete(self, record_id: str, confirm: Callable[[DeletionRequest], bool]) -> bool:
        """Run the whole protocol around a synchronous yes/no decision.

        Returns True when the record was deleted, False when declined.
        """
        req = self.request(record_id)
        if not confirm(req):
            self.decline(req.token)
            return False
        await self.confirm(req.token)
        return True
