import logging
from fastapi import APIRouter, Depends, Query

from ..application.services.deletion import DeletionProtocol
from ..schemas.common.common import DeletionRequestResponse, MessageResponse
from .dependencies import get_deletion_protocol

logger = logging.getLogger(__name__)


def add_deletion_routes(router: APIRouter, collection: str) -> None:
    """Two-phase delete: ask for a token, then DELETE with that token"""
    get_protocol = get_deletion_protocol(collection)

    @router.post("/{record_id}/deletion-requests", response_model=DeletionRequestResponse, status_code=201)
    def request_deletion(record_id: str, protocol: DeletionProtocol = Depends(get_protocol)):
        req = protocol.request(record_id)
        return DeletionRequestResponse(
            token=req.token,
            collection=req.collection,
            record_id=req.record_id,
            prompt=req.prompt,
            expires_at=req.expires_at,
        )

    @router.delete("/deletion-requests/{token}", response_model=MessageResponse)
    def decline_deletion(token: str, protocol: DeletionProtocol = Depends(get_protocol)):
        req = protocol.decline(token)
        return MessageResponse(message=f"Deletion of {collection} record {req.record_id} cancelled")

    @router.delete("/{record_id}", response_model=MessageResponse)
    async def confirm_deletion(
        record_id: str,
        confirmation: str = Query(..., min_length=1),
        protocol: DeletionProtocol = Depends(get_protocol),
    ):
        await protocol.confirm(confirmation, record_id=record_id)
        return MessageResponse(message=f"{protocol.entity_label} deleted successfully")
