import time

from ingestion.config.settings import Settings
from ingestion.database.connection import get_connection
from ingestion.database.models import JobRecord
from ingestion.database.repositories.job_repository import JobRepository
from ingestion.logging.logger import Log
from ingestion.worker.job_runner import JobRunner


class Worker:
    """Poll loop over ingestion_jobs: claim -> run pipeline -> sleep when idle.

    Several workers may poll the same table; claims never overlap.
    """

    def __init__(
        self,
        job_repo: JobRepository,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._job_repo = job_repo
        self._job_runner = job_runner
        self._settings = settings

    def run(self, max_jobs: int | None = None) -> int:
        """Poll until interrupted, or until ``max_jobs`` jobs have run.

        Returns the number of jobs processed.
        """
        Log.info(
            f"Worker started, polling ingestion_jobs every "
            f"{self._settings.job_poll_interval_seconds}s"
        )
        jobs_done = 0
        try:
            while max_jobs is None or jobs_done < max_jobs:
                if self.poll_once():
                    jobs_done += 1
                else:
                    Log.debug("No ingestion jobs available, sleeping")
                    time.sleep(self._settings.job_poll_interval_seconds)
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")
        Log.info(f"Worker stopped after {jobs_done} jobs")
        return jobs_done

    def poll_once(self) -> bool:
        """Claim and run at most one job. Returns True if a job ran."""
        job = self._try_claim_job()
        if job is None:
            return False
        self._job_runner.run(job)
        return True

    def _try_claim_job(self) -> JobRecord | None:
        """Attempt to claim the next pending job. Gracefully handle DB errors."""
        try:
            with get_connection() as conn:
                return self._job_repo.claim_next_job(conn)
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
