"""
AuditEntry model: a write-once record of a provider mutation.
"""

from datetime import datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from .validation_job import utcnow

AuditAction = Literal["CREATE", "UPDATE", "DELETE"]


class AuditEntry(BaseModel):
    """
    Append-only audit entry.

    Attributes:
        id: Entry identifier
        action: CREATE, UPDATE or DELETE
        entity_type: Kind of entity mutated (e.g. "provider")
        entity_id: Identifier of the mutated entity
        old_value: JSON snapshot before the mutation
        new_value: JSON snapshot after the mutation
        actor_id: Who triggered the mutation
        ip_address: Origin of the request, when known
        timestamp: When the mutation happened
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    action: AuditAction
    entity_type: str
    entity_id: str
    old_value: str | None = None
    new_value: str | None = None
    actor_id: str
    ip_address: str | None = None
    timestamp: datetime = Field(default_factory=utcnow)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "action": "CREATE",
                "entity_type": "provider",
                "entity_id": "0b8e4c55-0f6d-4c1a-9a77-2f3f0b6f1f11",
                "old_value": None,
                "new_value": "{\"npi\": \"1234567890\"}",
                "actor_id": "user-42",
            }
        }
