"""
Audit trail for provider mutations.

AuditEmitter is the write-only contract used by the pipeline and the provider
service. Emission is best-effort: a failed write is logged and counted but
never propagates to the mutation that triggered it.
"""

import json
from typing import Any

import psycopg
from pydantic import BaseModel

from src.core.models import AuditAction, AuditEntry
from src.observability import metrics
from src.observability.logger import get_logger

from .connection import DatabaseConnectionPool
from .store import AuditStore

logger = get_logger(__name__)


def snapshot(value: Any) -> str | None:
    """Serialize an entity for the old_value/new_value columns."""
    if value is None:
        return None
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    return json.dumps(value, default=str)


class AuditEmitter:
    """
    Records CREATE/UPDATE/DELETE entries on an append-only AuditStore.
    """

    def __init__(self, store: AuditStore):
        """
        Initialize the emitter.

        Args:
            store: Append-only audit sink
        """
        self.store = store

    def record(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: str,
        old_value: Any = None,
        new_value: Any = None,
        actor_id: str = "system",
        ip_address: str | None = None,
    ) -> AuditEntry | None:
        """
        Record one audit entry, fire-and-forget.

        Returns:
            The written entry, or None when the write failed
        """
        try:
            entry = AuditEntry(
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                old_value=snapshot(old_value),
                new_value=snapshot(new_value),
                actor_id=actor_id,
                ip_address=ip_address,
            )
            self.store.append(entry)
        except Exception as e:
            logger.error(
                f"Failed to write audit entry: {e}",
                extra={"action": action, "entity_type": entity_type, "entity_id": entity_id},
            )
            metrics.record_audit_failure(action)
            return None

        logger.debug(f"Audit {action} {entity_type} {entity_id} by {actor_id}")
        return entry


class PostgresAuditStore(AuditStore):
    """
    Audit store backed by the ``audit_logs`` table.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    def append(self, entry: AuditEntry) -> None:
        insert_sql = """
            INSERT INTO audit_logs (
                id, action, entity_type, entity_id, old_value, new_value,
                actor_id, ip_address, created_at
            ) VALUES (
                %(id)s, %(action)s, %(entity_type)s, %(entity_id)s, %(old_value)s,
                %(new_value)s, %(actor_id)s, %(ip_address)s, %(timestamp)s
            )
        """
        try:
            self.pool.execute_command(insert_sql, entry.model_dump())
        except psycopg.DatabaseError as e:
            logger.error(f"Failed to insert audit log: {e}")
            raise

    def list_for_entity(self, entity_id: str) -> list[AuditEntry]:
        query_sql = """
            SELECT id, action, entity_type, entity_id, old_value, new_value,
                   actor_id, ip_address, created_at AS timestamp
            FROM audit_logs
            WHERE entity_id = %s
            ORDER BY seq
        """
        rows = self.pool.execute_query(query_sql, (entity_id,))
        return [AuditEntry(**row) for row in rows]
