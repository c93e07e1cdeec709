"""
In-memory store implementations.

Each store guards its state with a lock so writes are serialized across
job worker threads and request handlers.
"""

import threading
from collections.abc import Callable

from src.core.exceptions import ProviderNotFoundError
from src.core.models import AuditEntry, JobError, ProviderRecord, ValidationJob

from .store import AuditStore, JobErrorStore, JobStore, ProviderStore, Stores


class InMemoryProviderStore(ProviderStore):

    def __init__(self):
        self._lock = threading.Lock()
        self._providers: dict[str, ProviderRecord] = {}

    def create(self, provider: ProviderRecord) -> ProviderRecord:
        with self._lock:
            if provider.id in self._providers:
                raise ValueError(f"Provider already exists: {provider.id}")
            self._providers[provider.id] = provider
        return provider

    def modify(
        self,
        provider_id: str,
        change: Callable[[ProviderRecord], ProviderRecord],
    ) -> tuple[ProviderRecord, ProviderRecord]:
        with self._lock:
            old = self._providers.get(provider_id)
            if old is None:
                raise ProviderNotFoundError(provider_id)
            new = change(old)
            self._providers[provider_id] = new
        return old, new

    def find(self, provider_id: str) -> ProviderRecord | None:
        with self._lock:
            return self._providers.get(provider_id)

    def update(self, provider: ProviderRecord) -> ProviderRecord:
        with self._lock:
            if provider.id not in self._providers:
                raise ProviderNotFoundError(provider.id)
            self._providers[provider.id] = provider
        return provider

    def delete(self, provider_id: str) -> bool:
        with self._lock:
            return self._providers.pop(provider_id, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._providers)

    def all(self) -> list[ProviderRecord]:
        with self._lock:
            return list(self._providers.values())


class InMemoryJobStore(JobStore):

    def __init__(self):
        self._lock = threading.Lock()
        self._jobs: dict[str, ValidationJob] = {}

    def create(self, job: ValidationJob) -> ValidationJob:
        with self._lock:
            if job.id in self._jobs:
                raise ValueError(f"Job already exists: {job.id}")
            self._jobs[job.id] = job
        return job

    def find(self, job_id: str) -> ValidationJob | None:
        with self._lock:
            return self._jobs.get(job_id)

    def transition(self, job_id: str, expected_status: str, job: ValidationJob) -> bool:
        with self._lock:
            current = self._jobs.get(job_id)
            if current is None or current.status != expected_status:
                return False
            self._jobs[job_id] = job
            return True


class InMemoryJobErrorStore(JobErrorStore):

    def __init__(self):
        self._lock = threading.Lock()
        self._errors: list[JobError] = []

    def add_many(self, errors: list[JobError]) -> int:
        with self._lock:
            self._errors.extend(errors)
        return len(errors)

    def list_for_job(self, job_id: str) -> list[JobError]:
        with self._lock:
            errors = [e for e in self._errors if e.job_id == job_id]
        # sorted() is stable, so issues keep insertion order within a row
        return sorted(errors, key=lambda e: e.row_number)


class InMemoryAuditStore(AuditStore):

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: list[AuditEntry] = []

    def append(self, entry: AuditEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def list_for_entity(self, entity_id: str) -> list[AuditEntry]:
        with self._lock:
            return [e for e in self._entries if e.entity_id == entity_id]

    def all(self) -> list[AuditEntry]:
        with self._lock:
            return list(self._entries)


def create_memory_stores() -> Stores:
    return Stores(
        providers=InMemoryProviderStore(),
        jobs=InMemoryJobStore(),
        job_errors=InMemoryJobErrorStore(),
        audit=InMemoryAuditStore(),
    )
