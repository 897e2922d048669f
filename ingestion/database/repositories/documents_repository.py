from typing import Any

from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from ingestion.database.connection import get_connection
from ingestion.pipeline.exceptions import DocumentNotFoundError
from ingestion.pipeline.models import Document, Stage, StageStatus


class DocumentsRepository:
    """Database operations for the documents table."""

    def find_by_id(self, document_id: int) -> Document:
        """Find a document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, uuid, tenant_id, filename, storage_disk, mime_type,
                           file_size_bytes, file_hash_sha256, processing_level,
                           extraction_status, classification_status,
                           metadata_status, chunking_status
                    FROM documents
                    WHERE id = %s
                    """,
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        return Document(
            id=row["id"],
            uuid=str(row["uuid"]),
            tenant_id=row["tenant_id"],
            filename=row["filename"],
            storage_disk=row["storage_disk"],
            mime_type=row["mime_type"],
            file_size_bytes=row["file_size_bytes"],
            file_hash_sha256=row["file_hash_sha256"],
            processing_level=row["processing_level"],
            extraction_status=StageStatus(row["extraction_status"]),
            classification_status=StageStatus(row["classification_status"]),
            metadata_status=StageStatus(row["metadata_status"]),
            chunking_status=StageStatus(row["chunking_status"]),
        )

    def update_stage_status(self, document: Document, stage: Stage, status: StageStatus) -> None:
        """Set one per-stage status column.

        Raises:
            DocumentNotFoundError: if the document does not exist for its tenant.
        """
        query = sql.SQL(
            "UPDATE documents SET {column} = %s, updated_at = NOW() "
            "WHERE id = %s AND tenant_id = %s"
        ).format(column=sql.Identifier(stage.status_column))
        self._execute_update(document, query, (status.value,))

    def save_extraction(
        self,
        document: Document,
        *,
        text: str,
        method: str,
        confidence: float,
        page_count: int,
    ) -> None:
        """Persist extracted text and how it was obtained.

        Raises:
            DocumentNotFoundError: if the document does not exist for its tenant.
        """
        self._execute_update(
            document,
            """
            UPDATE documents
            SET extracted_text = %s,
                extraction_method = %s,
                extraction_confidence = %s,
                page_count = %s,
                updated_at = NOW()
            WHERE id = %s AND tenant_id = %s
            """,
            (text, method, confidence, page_count),
        )

    def save_classification(
        self,
        document: Document,
        *,
        document_type: str,
        confidence: float,
        method: str,
    ) -> None:
        """Persist the assigned document type.

        Raises:
            DocumentNotFoundError: if the document does not exist for its tenant.
        """
        self._execute_update(
            document,
            """
            UPDATE documents
            SET document_type = %s,
                classification_confidence = %s,
                classification_method = %s,
                updated_at = NOW()
            WHERE id = %s AND tenant_id = %s
            """,
            (document_type, confidence, method),
        )

    def save_processing_config(self, document: Document, config: dict[str, Any]) -> None:
        """Persist the metadata-stage summary as JSONB.

        Raises:
            DocumentNotFoundError: if the document does not exist for its tenant.
        """
        self._execute_update(
            document,
            """
            UPDATE documents
            SET processing_config = %s, updated_at = NOW()
            WHERE id = %s AND tenant_id = %s
            """,
            (Jsonb(config),),
        )

    def save_chunks_count(self, document: Document, chunks_count: int) -> None:
        """Persist the number of chunks and stamp the processing time.

        Raises:
            DocumentNotFoundError: if the document does not exist for its tenant.
        """
        self._execute_update(
            document,
            """
            UPDATE documents
            SET chunks_count = %s, processed_at = NOW(), updated_at = NOW()
            WHERE id = %s AND tenant_id = %s
            """,
            (chunks_count,),
        )

    @staticmethod
    def _execute_update(
        document: Document,
        query: str | sql.Composed,
        params: tuple[Any, ...],
    ) -> None:
        """Run an UPDATE whose last two placeholders are the id and tenant."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                params = (*params, document.id, document.tenant_id)
                cur.execute(query, params)  # type: ignore[arg-type]
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(
                        f"Document {document.id} not found for tenant {document.tenant_id}"
                    )
            conn.commit()
