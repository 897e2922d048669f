from psycopg.types.json import Jsonb

from ingestion.database.connection import get_connection


class ChunksRepository:
    """Database operations for the document_chunks table."""

    def replace(self, *, document_id: int, tenant_id: int, chunks: list[str]) -> None:
        """Swap the stored chunks of a document for a new list in one transaction."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM document_chunks WHERE document_id = %s AND tenant_id = %s",
                    (document_id, tenant_id),
                )
                cur.executemany(
                    """
                    INSERT INTO document_chunks
                        (document_id, tenant_id, chunk_index, content, metadata)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    [
                        (
                            document_id,
                            tenant_id,
                            index,
                            content,
                            Jsonb({"char_count": len(content)}),
                        )
                        for index, content in enumerate(chunks)
                    ],
                )
            conn.commit()
