"""
Background execution of validation jobs.
"""

from concurrent.futures import Future, ThreadPoolExecutor

from src.observability.logger import get_logger

from .pipeline import JobOrchestrator

logger = get_logger(__name__)


class JobExecutor:
    """
    Runs JobOrchestrator.run on a bounded thread pool.

    submit() returns as soon as the job is queued; callers poll the job store
    for progress.
    """

    def __init__(self, orchestrator: JobOrchestrator, max_workers: int = 4):
        self.orchestrator = orchestrator
        self.max_workers = max_workers
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="validation-job")

    def submit(self, job_id: str) -> Future:
        """Queue a pending job for processing."""
        future = self._pool.submit(self.orchestrator.run, job_id)
        future.add_done_callback(lambda f: self._log_outcome(job_id, f))
        logger.info(f"Queued job {job_id}", extra={"job_id": job_id})
        return future

    @staticmethod
    def _log_outcome(job_id: str, future: Future) -> None:
        if future.cancelled():
            logger.warning(f"Job {job_id} was cancelled before it ran", extra={"job_id": job_id})
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Job {job_id} could not be run: {error}", extra={"job_id": job_id})

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)
