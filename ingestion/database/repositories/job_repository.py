from typing import Any

import psycopg
from psycopg.rows import dict_row

from ingestion.database.connection import get_connection
from ingestion.database.models import JobRecord, JobStatus

_JOB_COLUMNS = (
    "id, document_id, processing_level, reprocess, status, attempts, "
    "error_message, locked_at, created_at, updated_at"
)


def _to_job(row: dict[str, Any]) -> JobRecord:
    return JobRecord(
        id=row["id"],
        document_id=row["document_id"],
        processing_level=row["processing_level"],
        reprocess=bool(row["reprocess"]),
        status=row["status"],
        attempts=row["attempts"],
        error_message=row["error_message"],
        locked_at=row["locked_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class JobRepository:
    """Queue operations on the ingestion_jobs table.

    Job states: pending -> processing -> done | partial | failed. A job that
    raised goes back to pending until ``max_attempts`` is reached.
    """

    def __init__(self, max_attempts: int) -> None:
        self._max_attempts = max_attempts

    def claim_next_job(self, conn: psycopg.Connection[Any]) -> JobRecord | None:
        """Lock the oldest pending job and flip it to processing in one statement.

        Rows locked by another worker are skipped, so concurrent workers
        never claim the same job.
        """
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                UPDATE ingestion_jobs
                SET status = 'processing', locked_at = NOW(), updated_at = NOW()
                WHERE id = (
                    SELECT id FROM ingestion_jobs
                    WHERE status = 'pending' AND attempts < %s
                    ORDER BY created_at
                    LIMIT 1
                    FOR UPDATE SKIP LOCKED
                )
                RETURNING {_JOB_COLUMNS}
                """,
                (self._max_attempts,),
            )
            row = cur.fetchone()
        conn.commit()
        return _to_job(row) if row is not None else None

    def mark_done(self, job_id: int) -> None:
        self._set_status(job_id, JobStatus.DONE, None)

    def mark_partial(self, job_id: int, error: str) -> None:
        """Record a pipeline that stopped before the requested level. Not retried."""
        self._set_status(job_id, JobStatus.PARTIAL, error)

    def mark_failed(self, job_id: int, error: str) -> None:
        """Record a job that exhausted its attempts."""
        self._set_status(job_id, JobStatus.FAILED, error)

    def increment_attempts(self, job_id: int) -> None:
        """Count a failed attempt and release the job back to the queue."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE ingestion_jobs
                SET attempts = attempts + 1, status = 'pending',
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (job_id,),
            )
            conn.commit()

    def find_by_id(self, job_id: int) -> JobRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_JOB_COLUMNS} FROM ingestion_jobs WHERE id = %s",
                    (job_id,),
                )
                row = cur.fetchone()
        return _to_job(row) if row is not None else None

    @staticmethod
    def _set_status(job_id: int, status: JobStatus, error: str | None) -> None:
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE ingestion_jobs
                SET status = %s, error_message = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (status.value, error, job_id),
            )
            conn.commit()
