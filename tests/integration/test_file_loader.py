from pathlib import Path

import pytest

from ingestion.database.repositories.documents_repository import DocumentsRepository
from ingestion.pipeline.file_loader import FileLoader


@pytest.mark.integration
class TestFileLoaderLoad:
    def test_load_returns_pdf_bytes(
        self,
        invoice_pdf_on_disk: tuple[int, str, Path],
        invoice_pdf_bytes: bytes,
    ) -> None:
        document_id, _doc_uuid, files_root = invoice_pdf_on_disk
        document = DocumentsRepository().find_by_id(document_id)

        result = FileLoader(files_root=files_root).load(document)

        assert result == invoice_pdf_bytes

    def test_load_raises_file_not_found(
        self, seed_document: tuple[int, str, int], files_root: Path
    ) -> None:
        document = DocumentsRepository().find_by_id(seed_document[0])

        with pytest.raises(FileNotFoundError, match="File not found"):
            FileLoader(files_root=files_root).load(document)
