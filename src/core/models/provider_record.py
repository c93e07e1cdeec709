"""
ProviderRecord model representing a persisted healthcare provider.
"""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from .validation_job import utcnow

# Columns a provider can be built from; anything else in an input row is ignored.
PROVIDER_FIELDS: tuple[str, ...] = (
    "npi",
    "first_name",
    "last_name",
    "specialty",
    "phone",
    "email",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "zip_code",
    "license_number",
    "license_state",
    "license_expiry",
    "credential",
    "taxonomy_code",
)


class ProviderRecord(BaseModel):
    """
    Persisted provider entity. Owned by the provider store once written.

    data_quality_score is recomputed on every create and update, never on read.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    npi: str | None = None
    first_name: str = ""
    last_name: str = ""
    specialty: str | None = None
    phone: str | None = None
    email: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    license_number: str | None = None
    license_state: str | None = None
    license_expiry: str | None = None
    credential: str | None = None
    taxonomy_code: str | None = None
    is_active: bool = True
    data_quality_score: int = Field(0, ge=0, le=100)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    created_by: str | None = None
    updated_by: str | None = None
