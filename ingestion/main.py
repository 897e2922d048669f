from ingestion.config.settings import Settings
from ingestion.database.connection import close_pool, init_pool
from ingestion.database.repositories.job_repository import JobRepository
from ingestion.logging.logger import Log
from ingestion.pipeline.orchestrator import build_pipeline
from ingestion.worker.job_runner import JobRunner
from ingestion.worker.worker import Worker


def build_worker(settings: Settings) -> Worker:
    """Wire the job queue, the four-level pipeline and the poll loop."""
    job_repo = JobRepository(settings.max_job_attempts)
    runner = JobRunner(build_pipeline(settings), job_repo, settings)
    return Worker(job_repo, runner, settings)


def main() -> None:
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(
        f"Starting ingestion worker (env={settings.app_env}, ai={settings.ai_provider}, "
        f"ocr={settings.ocr_provider}, pdf={settings.pdf_engine})"
    )
    init_pool(settings)
    try:
        build_worker(settings).run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
