"""
Provider service: the single write path for provider records.

Every create and update recomputes the data quality score; every mutation
emits an audit entry after it has been persisted.
"""

from collections.abc import Mapping
from typing import Any

from src.core.exceptions import ProviderNotFoundError
from src.core.models import PROVIDER_FIELDS, ProviderRecord, RawRecord
from src.core.models.validation_job import utcnow
from src.core.scoring import calculate_quality_score
from src.observability import metrics
from src.observability.logger import get_logger
from src.warehouse.audit import AuditEmitter
from src.warehouse.store import ProviderStore

logger = get_logger(__name__)

ENTITY_TYPE = "provider"


def _clean(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def provider_data_from_record(record: RawRecord) -> dict[str, Any]:
    """
    Map an imported row onto provider fields.

    Unknown columns are dropped. When the row has no first/last name columns
    but does have ``name``, the first token becomes the first name and the
    rest the last name.
    """
    data = {field: _clean(record.get(field)) for field in PROVIDER_FIELDS}

    if not data["first_name"] and not data["last_name"]:
        parts = record.get("name").split(None, 1)
        if parts:
            data["first_name"] = parts[0]
            data["last_name"] = parts[1] if len(parts) > 1 else ""

    return data


class ProviderService:
    """
    Creates, updates and deletes providers with scoring and auditing.
    """

    def __init__(self, store: ProviderStore, audit: AuditEmitter):
        """
        Args:
            store: Provider store (owns the persisted records)
            audit: Best-effort audit emitter
        """
        self.store = store
        self.audit = audit

    @staticmethod
    def _provider_fields(data: Mapping[str, Any]) -> dict[str, Any]:
        fields = {k: _clean(v) for k, v in data.items() if k in PROVIDER_FIELDS}
        for name_field in ("first_name", "last_name"):
            if name_field in fields and fields[name_field] is None:
                fields[name_field] = ""
        if "is_active" in data:
            fields["is_active"] = data["is_active"] is not False
        return fields

    def get(self, provider_id: str) -> ProviderRecord:
        provider = self.store.find(provider_id)
        if provider is None:
            raise ProviderNotFoundError(provider_id)
        return provider

    def create(
        self,
        data: Mapping[str, Any],
        actor_id: str,
        ip_address: str | None = None,
    ) -> ProviderRecord:
        """
        Persist a new provider.

        Args:
            data: Provider fields (unknown keys are ignored)
            actor_id: Who is creating the provider
            ip_address: Request origin, when known

        Returns:
            The stored ProviderRecord
        """
        fields = {"first_name": "", "last_name": "", **self._provider_fields(data)}
        provider = ProviderRecord(
            **fields,
            data_quality_score=calculate_quality_score(fields),
            created_by=actor_id,
            updated_by=actor_id,
        )

        try:
            self.store.create(provider)
        except Exception:
            metrics.record_provider_write("create", success=False)
            raise
        metrics.record_provider_write("create")

        self.audit.record("CREATE", ENTITY_TYPE, provider.id, None, provider, actor_id, ip_address)
        return provider

    def update(
        self,
        provider_id: str,
        data: Mapping[str, Any],
        actor_id: str,
        ip_address: str | None = None,
    ) -> ProviderRecord:
        """
        Apply changes to an existing provider and recompute its score.

        The merge runs inside the store's atomic modify, so concurrent
        edits of different fields of the same provider all survive.

        Raises:
            ProviderNotFoundError: If the provider does not exist
        """
        changes = self._provider_fields(data)

        def apply_changes(current: ProviderRecord) -> ProviderRecord:
            merged = {**current.model_dump(), **changes}
            merged.update(
                data_quality_score=calculate_quality_score(merged),
                updated_at=utcnow(),
                updated_by=actor_id,
            )
            return ProviderRecord(**merged)

        try:
            old, updated = self.store.modify(provider_id, apply_changes)
        except ProviderNotFoundError:
            raise
        except Exception:
            metrics.record_provider_write("update", success=False)
            raise
        metrics.record_provider_write("update")

        self.audit.record("UPDATE", ENTITY_TYPE, provider_id, old, updated, actor_id, ip_address)
        return updated

    def delete(self, provider_id: str, actor_id: str, ip_address: str | None = None) -> None:
        """
        Remove a provider.

        Raises:
            ProviderNotFoundError: If the provider does not exist
        """
        old = self.get(provider_id)
        if not self.store.delete(provider_id):
            raise ProviderNotFoundError(provider_id)
        metrics.record_provider_write("delete")

        self.audit.record("DELETE", ENTITY_TYPE, provider_id, old, None, actor_id, ip_address)

    def import_record(self, record: RawRecord, actor_id: str) -> ProviderRecord:
        """Create a provider from a validated input row."""
        return self.create(provider_data_from_record(record), actor_id)
