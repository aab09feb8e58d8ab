# hospital_dashboard/schemas/common/common.py
from pydantic import BaseModel, ConfigDict, model_validator
from typing import Any, ClassVar, Dict, Optional, Tuple
from datetime import datetime

class DraftModel(BaseModel):
    """Base for create payloads: unknown keys are rejected, enums stored as values"""
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

class PatchModel(BaseModel):
    """Base for partial updates.

    Every field is optional, but a field that is present may only be null when
    it is listed in `nullable_fields`.
    """
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    nullable_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_null_required(self):
        for name in sorted(self.model_fields_set):
            if getattr(self, name) is None and name not in self.nullable_fields:
                raise ValueError(f"{name} cannot be empty")
        return self

class RecordResponse(BaseModel):
    id: str
    created_at: datetime
    updated_at: datetime

class ErrorResponse(BaseModel):
    success: bool = False
    data: Optional[Any] = None
    error: str
    details: Optional[Dict[str, str]] = None

class DeletionRequestResponse(BaseModel):
    token: str
    collection: str
    record_id: str
    prompt: str
    expires_at: datetime

class MessageResponse(BaseModel):
    success: bool = True
    message: str
