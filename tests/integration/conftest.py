import os
import uuid
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest
from psycopg.rows import dict_row

from ingestion.config.settings import Settings
from ingestion.database.connection import close_pool, get_connection, init_pool
from ingestion.database.models import JobRecord


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "ingestion_test")
    return Settings(ai_provider="example", ocr_provider="disabled")


def _choose_existing_tenant_id(db_conn: psycopg.Connection[Any]) -> int:
    with db_conn.cursor() as cur:
        cur.execute("SELECT id FROM tenants ORDER BY id LIMIT 1")
        row = cur.fetchone()
    if row is None:
        pytest.skip("No tenants rows in DB for integration test setup")
    return int(row[0])


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
    except Exception as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to point at it")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup() -> Generator[list[tuple[str, int]], None, None]:
    """Collect (table, id) pairs; jobs go before documents, which cascade to their records."""
    cleanup: list[tuple[str, int]] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for table in ("ingestion_jobs", "documents"):
                for name, row_id in cleanup:
                    if name == table:
                        cur.execute(f"DELETE FROM {table} WHERE id = %s", (row_id,))
        conn.commit()


@pytest.fixture
def seed_document(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[tuple[str, int]],
) -> tuple[int, str, int]:
    """Insert a pending PDF document. Returns (document_id, uuid, tenant_id)."""
    doc_uuid = str(uuid.uuid4())
    tenant_id = _choose_existing_tenant_id(db_conn)
    with db_conn.cursor() as cur:
        cur.execute(
            """
            INSERT INTO documents
            (uuid, tenant_id, filename, storage_disk, file_size_bytes, mime_type,
             file_hash_sha256, processing_level)
            VALUES (%s::uuid, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id
            """,
            (doc_uuid, tenant_id, "factura_marzo.pdf", "local", 1024, "application/pdf", "a" * 64, 1),
        )
        row = cur.fetchone()
        assert row is not None
        document_id = row[0]
    db_conn.commit()
    integration_cleanup.append(("documents", document_id))
    return (document_id, doc_uuid, tenant_id)


@pytest.fixture
def seed_job(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[tuple[str, int]],
    seed_document: tuple[int, str, int],
) -> JobRecord:
    document_id = seed_document[0]
    with db_conn.cursor(row_factory=dict_row) as cur:
        cur.execute(
            """
            INSERT INTO ingestion_jobs (document_id, processing_level, status, attempts)
            VALUES (%s, 1, 'pending', 0)
            RETURNING id
            """,
            (document_id,),
        )
        row = cur.fetchone()
        assert row is not None
        job_id = row["id"]
    db_conn.commit()
    integration_cleanup.append(("ingestion_jobs", job_id))
    return JobRecord(
        id=job_id,
        document_id=document_id,
        processing_level=1,
        status="pending",
        attempts=0,
    )


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def invoice_pdf_on_disk(
    seed_document: tuple[int, str, int],
    files_root: Path,
    invoice_pdf_bytes: bytes,
) -> tuple[int, str, Path]:
    document_id, doc_uuid, tenant_id = seed_document
    path = files_root / str(tenant_id) / f"{doc_uuid}.pdf"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(invoice_pdf_bytes)
    return (document_id, doc_uuid, files_root)
