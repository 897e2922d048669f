from ingestion.config.settings import Settings
from ingestion.database.models import JobRecord
from ingestion.database.repositories.job_repository import JobRepository
from ingestion.logging.logger import Log
from ingestion.pipeline.orchestrator import ProgressivePipeline


class JobRunner:
    """Run one job, catch exceptions, and apply retry logic."""

    def __init__(
        self,
        pipeline: ProgressivePipeline,
        job_repo: JobRepository,
        settings: Settings,
    ) -> None:
        self._pipeline = pipeline
        self._job_repo = job_repo
        self._settings = settings

    def run(self, job: JobRecord) -> None:
        """Execute a single job with error handling.

        A pipeline that stops at a failed stage is recorded as partial and
        is not retried; only exceptions escaping the pipeline are.
        """
        Log.info(
            f"Running job {job.id} for document {job.document_id} "
            f"(level {job.processing_level}, attempt {job.attempts + 1})"
        )
        try:
            result = self._pipeline.process(
                job.document_id,
                job.processing_level,
                reprocess=job.reprocess,
            )
            if result.success:
                self._job_repo.mark_done(job.id)
                Log.info(f"Job {job.id} completed successfully")
            else:
                summary = "; ".join(f"{stage}: {error}" for stage, error in result.errors.items())
                self._job_repo.mark_partial(job.id, summary)
                Log.warning(f"Job {job.id} completed partially: {summary}")
        except Exception as exc:
            self._handle_failure(job, exc)

    def _handle_failure(self, job: JobRecord, exc: Exception) -> None:
        """Increment attempts; mark failed if at max, otherwise back to pending."""
        Log.exception(f"Job {job.id} failed: {exc}")
        if job.attempts + 1 >= self._settings.max_job_attempts:
            self._job_repo.mark_failed(job.id, str(exc))
            Log.error(f"Job {job.id} permanently failed after {job.attempts + 1} attempts")
        else:
            self._job_repo.increment_attempts(job.id)
            Log.warning(f"Job {job.id} will be retried (attempt {job.attempts + 1})")
