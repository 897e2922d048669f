from pathlib import Path, PurePath

from ingestion.pipeline.exceptions import UnsupportedStorageDiskError
from ingestion.pipeline.models import Document


def document_file_path(files_root: Path, document: Document) -> Path:
    """Build path to document file: {files_root}/{tenant_id}/{uuid}{suffix}"""
    suffix = PurePath(document.filename).suffix.lower() or ".pdf"
    return files_root / str(document.tenant_id) / f"{document.uuid}{suffix}"


class FileLoader:
    """Resolves the filesystem path of a document and reads its bytes."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def load(self, document: Document) -> bytes:
        """Read document bytes from disk.

        Raises:
            FileNotFoundError: if the file does not exist at resolved path.
            UnsupportedStorageDiskError: if storage_disk is not 'local'.
        """
        if document.storage_disk != "local":
            raise UnsupportedStorageDiskError(
                f"storage_disk '{document.storage_disk}' is not supported"
            )
        path = document_file_path(self._files_root, document)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return path.read_bytes()
