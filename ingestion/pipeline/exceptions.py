class PipelineError(Exception):
    """Base exception for pipeline stage failures."""


class DocumentNotFoundError(PipelineError):
    """Raised when a document cannot be found in the database."""


class UnsupportedStorageDiskError(PipelineError):
    """Raised when a document uses an unsupported storage disk type."""


class StagePreconditionError(PipelineError):
    """Raised when a stage runs without the output of the stage before it."""
