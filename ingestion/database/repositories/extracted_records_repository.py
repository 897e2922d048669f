from collections.abc import Iterable
from typing import Any

from psycopg import sql
from psycopg.types.json import Jsonb

from ingestion.database.connection import get_connection


class ExtractedRecordsRepository:
    """Stores one typed metadata record per document.

    Each document type has its own table with ``document_id``,
    ``tenant_id``, a JSONB ``data`` column and the ``validation_score``.
    """

    def replace(
        self,
        table: str,
        *,
        document_id: int,
        tenant_id: int,
        data: dict[str, Any],
        validation_score: int,
        stale_tables: Iterable[str] = (),
    ) -> None:
        """Delete any previous record of the document, then insert the new one.

        Both statements run in a single transaction. ``stale_tables`` lists
        other typed tables to clear, used when a reprocessed document
        changed type.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                for name in {table, *stale_tables}:
                    cur.execute(
                        sql.SQL(
                            "DELETE FROM {table} WHERE document_id = %s AND tenant_id = %s"
                        ).format(table=sql.Identifier(name)),
                        (document_id, tenant_id),
                    )
                cur.execute(
                    sql.SQL(
                        """
                        INSERT INTO {table} (document_id, tenant_id, data, validation_score)
                        VALUES (%s, %s, %s, %s)
                        """
                    ).format(table=sql.Identifier(table)),
                    (document_id, tenant_id, Jsonb(data), validation_score),
                )
            conn.commit()

    def find(self, table: str, document_id: int) -> dict[str, Any] | None:
        """Return the stored record data for a document, or None."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    sql.SQL("SELECT data FROM {table} WHERE document_id = %s").format(
                        table=sql.Identifier(table)
                    ),
                    (document_id,),
                )
                row = cur.fetchone()
        if row is None:
            return None
        data: dict[str, Any] = row[0]
        return data
