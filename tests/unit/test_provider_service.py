"""
Unit tests for the provider service and audit emitter.
"""

import json
import threading
import time

import pytest

from src.core.exceptions import ProviderNotFoundError
from src.core.models import RawRecord
from src.services.provider_service import ProviderService, provider_data_from_record
from src.warehouse.audit import AuditEmitter, snapshot
from src.warehouse.memory_store import InMemoryAuditStore, InMemoryProviderStore

pytestmark = pytest.mark.unit


class FailingAuditStore(InMemoryAuditStore):
    """Audit sink that is down"""

    def append(self, entry):
        raise ConnectionError("audit database unavailable")


class FailingProviderStore(InMemoryProviderStore):
    """Provider store that rejects every insert"""

    def create(self, provider):
        raise RuntimeError("disk full")


class SlowProviderStore(InMemoryProviderStore):
    """Provider store whose reads and edits take long enough for writers to overlap"""

    DELAY = 0.05

    def find(self, provider_id):
        found = super().find(provider_id)
        time.sleep(self.DELAY)
        return found

    def modify(self, provider_id, change):
        def slow_change(current):
            time.sleep(self.DELAY)
            return change(current)

        return super().modify(provider_id, slow_change)


@pytest.fixture
def audit_store():
    return InMemoryAuditStore()


@pytest.fixture
def service(audit_store):
    return ProviderService(InMemoryProviderStore(), AuditEmitter(audit_store))


PROVIDER = {
    "npi": "1234567890",
    "first_name": "Asha",
    "last_name": "Raman",
    "specialty": "Cardiology",
    "phone": "+91-98765-43210",
}


class TestProviderService:
    """Tests for ProviderService"""

    def test_create_scores_and_audits(self, service, audit_store):
        provider = service.create(PROVIDER, actor_id="user-1", ip_address="10.0.0.1")

        assert provider.data_quality_score == 36
        assert provider.created_by == "user-1"
        assert service.store.find(provider.id) == provider

        entries = audit_store.all()
        assert len(entries) == 1
        entry = entries[0]
        assert entry.action == "CREATE"
        assert entry.entity_type == "provider"
        assert entry.entity_id == provider.id
        assert entry.old_value is None
        assert json.loads(entry.new_value)["npi"] == "1234567890"
        assert entry.actor_id == "user-1"
        assert entry.ip_address == "10.0.0.1"

    def test_unknown_keys_are_ignored(self, service):
        provider = service.create({**PROVIDER, "favourite_colour": "blue"}, actor_id="u")
        assert not hasattr(provider, "favourite_colour")

    def test_update_recomputes_score(self, service, audit_store):
        provider = service.create(PROVIDER, actor_id="u")
        updated = service.update(provider.id, {"email": "asha@example.com", "city": "Pune"}, actor_id="u2")

        assert updated.id == provider.id
        assert updated.email == "asha@example.com"
        assert updated.npi == "1234567890"
        assert updated.data_quality_score == 50
        assert updated.updated_by == "u2"
        assert updated.created_by == "u"
        assert updated.updated_at >= provider.updated_at

        entry = audit_store.list_for_entity(provider.id)[-1]
        assert entry.action == "UPDATE"
        assert json.loads(entry.old_value)["data_quality_score"] == 36
        assert json.loads(entry.new_value)["data_quality_score"] == 50

    def test_concurrent_updates_of_different_fields_both_survive(self, audit_store):
        service = ProviderService(SlowProviderStore(), AuditEmitter(audit_store))
        provider = service.create(PROVIDER, actor_id="u")
        start = threading.Barrier(2)
        errors = []

        def edit(changes, actor):
            start.wait()
            try:
                service.update(provider.id, changes, actor_id=actor)
            except Exception as e:
                errors.append(e)

        threads = [
            threading.Thread(target=edit, args=({"city": "Pune"}, "editor-a")),
            threading.Thread(target=edit, args=({"email": "a@b.co"}, "editor-b")),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        final = service.get(provider.id)
        assert final.city == "Pune"
        assert final.email == "a@b.co"
        assert final.data_quality_score == 50

        updates = [e for e in audit_store.list_for_entity(provider.id) if e.action == "UPDATE"]
        assert len(updates) == 2
        first, second = sorted(updates, key=lambda e: json.loads(e.new_value)["updated_at"])
        # The later edit started from the earlier one's result
        assert json.loads(second.old_value) == json.loads(first.new_value)

    def test_clearing_a_field_lowers_score(self, service):
        provider = service.create(PROVIDER, actor_id="u")
        updated = service.update(provider.id, {"phone": "  "}, actor_id="u")
        assert updated.phone is None
        assert updated.data_quality_score == 29

    def test_delete_audits_old_value(self, service, audit_store):
        provider = service.create(PROVIDER, actor_id="u")
        service.delete(provider.id, actor_id="admin")

        assert service.store.find(provider.id) is None
        entry = audit_store.list_for_entity(provider.id)[-1]
        assert entry.action == "DELETE"
        assert entry.new_value is None
        assert json.loads(entry.old_value)["id"] == provider.id
        assert entry.actor_id == "admin"

    def test_unknown_provider(self, service, audit_store):
        with pytest.raises(ProviderNotFoundError):
            service.update("missing", {"email": "a@b.co"}, actor_id="u")
        with pytest.raises(ProviderNotFoundError):
            service.delete("missing", actor_id="u")
        assert audit_store.all() == []

    def test_audit_failure_does_not_fail_the_mutation(self, caplog):
        service = ProviderService(InMemoryProviderStore(), AuditEmitter(FailingAuditStore()))
        provider = service.create(PROVIDER, actor_id="u")

        assert service.store.count() == 1
        assert provider.data_quality_score == 36
        assert "Failed to write audit entry" in caplog.text

    def test_store_failure_propagates_without_audit(self, audit_store):
        service = ProviderService(FailingProviderStore(), AuditEmitter(audit_store))
        with pytest.raises(RuntimeError):
            service.create(PROVIDER, actor_id="u")
        assert audit_store.all() == []


class TestProviderDataFromRecord:
    """Tests for mapping imported rows onto provider fields"""

    def test_name_is_split(self):
        record = RawRecord(row_number=2, values={"name": "Asha K Raman", "npi": "1234567890"})
        data = provider_data_from_record(record)
        assert data["first_name"] == "Asha"
        assert data["last_name"] == "K Raman"

    def test_single_token_name(self):
        data = provider_data_from_record(RawRecord(row_number=2, values={"name": "Asha"}))
        assert (data["first_name"], data["last_name"]) == ("Asha", "")

    def test_values_are_stored_as_given(self):
        record = RawRecord(row_number=2, values={"first_name": "Asha", "phone": "9876543210",
                                                 "license_state": "ka", "extra": "x"})
        data = provider_data_from_record(record)
        assert data["phone"] == "9876543210"
        assert data["license_state"] == "ka"
        assert "extra" not in data
        assert data["email"] is None


class TestAuditEmitter:
    """Tests for AuditEmitter"""

    def test_returns_entry(self, audit_store):
        entry = AuditEmitter(audit_store).record("CREATE", "provider", "p1", new_value={"a": 1}, actor_id="u")
        assert entry is not None
        assert entry.new_value == '{"a": 1}'
        assert audit_store.all() == [entry]

    def test_failure_returns_none(self):
        assert AuditEmitter(FailingAuditStore()).record("DELETE", "provider", "p1") is None

    def test_snapshot(self):
        assert snapshot(None) is None
        assert json.loads(snapshot({"when": 1})) == {"when": 1}
