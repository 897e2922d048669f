from pathlib import Path

import pytest

from ingestion.pipeline.exceptions import UnsupportedStorageDiskError
from ingestion.pipeline.file_loader import FileLoader, document_file_path
from ingestion.pipeline.models import Document


def _make_document(
    storage_disk: str = "local",
    uuid: str = "abc-123",
    filename: str = "factura.pdf",
) -> Document:
    return Document(
        id=1,
        uuid=uuid,
        tenant_id=10,
        filename=filename,
        storage_disk=storage_disk,
        mime_type="application/pdf",
        file_size_bytes=1024,
        file_hash_sha256="a" * 64,
    )


def _write(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


class TestDocumentFilePath:
    def test_groups_files_by_tenant(self) -> None:
        path = document_file_path(Path("/files"), _make_document())
        assert path == Path("/files/10/abc-123.pdf")

    def test_suffix_is_lowercased(self) -> None:
        path = document_file_path(Path("/files"), _make_document(filename="ACTA.PDF"))
        assert path.name == "abc-123.pdf"

    def test_missing_suffix_defaults_to_pdf(self) -> None:
        path = document_file_path(Path("/files"), _make_document(filename="escaneo"))
        assert path.suffix == ".pdf"


class TestLoadReturnsBytes:
    def test_returns_bytes_for_local_disk(self, tmp_path: Path) -> None:
        loader = FileLoader(files_root=tmp_path)
        _write(tmp_path / "10" / "abc-123.pdf", b"%PDF test content")

        result = loader.load(_make_document())

        assert result == b"%PDF test content"

    def test_reads_correct_file_by_uuid(self, tmp_path: Path) -> None:
        loader = FileLoader(files_root=tmp_path)
        _write(tmp_path / "10" / "abc-123.pdf", b"%PDF first")
        _write(tmp_path / "10" / "def-456.pdf", b"%PDF other")

        result = loader.load(_make_document(uuid="def-456"))

        assert result == b"%PDF other"


class TestLoadErrors:
    def test_raises_unsupported_storage_disk(self) -> None:
        loader = FileLoader(files_root=Path("/files"))

        with pytest.raises(UnsupportedStorageDiskError, match="s3"):
            loader.load(_make_document(storage_disk="s3"))

    def test_raises_file_not_found(self, tmp_path: Path) -> None:
        loader = FileLoader(files_root=tmp_path)

        with pytest.raises(FileNotFoundError, match="missing"):
            loader.load(_make_document(uuid="missing"))

    def test_default_root(self) -> None:
        assert FileLoader()._files_root == FileLoader.FILES_ROOT
