"""
Wiring of stores, services and the job executor from Settings.
"""

from dataclasses import dataclass

from src.batch.executor import JobExecutor
from src.batch.pipeline import JobOrchestrator
from src.core.classifier import RecordClassifier
from src.core.rules import ReferenceData, load_reference_data
from src.core.settings import Settings
from src.observability.logger import get_logger
from src.warehouse.audit import AuditEmitter
from src.warehouse.connection import DatabaseConnectionPool
from src.warehouse.memory_store import create_memory_stores
from src.warehouse.postgres_store import create_postgres_stores
from src.warehouse.store import Stores

from .provider_service import ProviderService
from .upload_service import UploadService

logger = get_logger(__name__)


@dataclass
class Application:
    """Everything a running pipeline instance needs."""

    settings: Settings
    reference: ReferenceData
    stores: Stores
    providers: ProviderService
    orchestrator: JobOrchestrator
    executor: JobExecutor | None
    uploads: UploadService
    pool: DatabaseConnectionPool | None = None

    def close(self) -> None:
        if self.executor is not None:
            self.executor.shutdown(wait=True)
        if self.pool is not None:
            self.pool.close()


def build_stores(settings: Settings) -> tuple[Stores, DatabaseConnectionPool | None]:
    """Create the configured store backend."""
    if settings.store_backend == "postgres":
        pool = DatabaseConnectionPool()
        pool.open()
        return create_postgres_stores(pool), pool
    return create_memory_stores(), None


def build_application(
    settings: Settings | None = None,
    stores: Stores | None = None,
    run_in_background: bool = True,
) -> Application:
    """
    Build an Application.

    Args:
        settings: Runtime settings (read from the environment if omitted)
        stores: Pre-built stores; overrides the configured backend
        run_in_background: Start a JobExecutor; when False, uploads stay
            pending until orchestrator.run() is called
    """
    settings = settings or Settings.from_env()
    reference = load_reference_data(settings.reference_data_path)

    pool = None
    if stores is None:
        stores, pool = build_stores(settings)

    providers = ProviderService(stores.providers, AuditEmitter(stores.audit))
    orchestrator = JobOrchestrator(
        jobs=stores.jobs,
        job_errors=stores.job_errors,
        providers=providers,
        classifier=RecordClassifier(reference, max_workers=settings.classifier_workers),
    )
    executor = JobExecutor(orchestrator, settings.job_workers) if run_in_background else None
    uploads = UploadService(
        jobs=stores.jobs,
        job_errors=stores.job_errors,
        executor=executor,
        upload_dir=settings.upload_dir,
        max_upload_bytes=settings.max_upload_bytes,
    )

    logger.info(
        "Pipeline ready",
        extra={
            "store_backend": "postgres" if pool else "memory",
            "job_workers": settings.job_workers if executor else 0,
        },
    )
    return Application(
        settings=settings,
        reference=reference,
        stores=stores,
        providers=providers,
        orchestrator=orchestrator,
        executor=executor,
        uploads=uploads,
        pool=pool,
    )
