class SchemaError(Exception):
    """Raised when the declarative schema file is malformed."""


class ValidationFailure(Exception):
    """Raised by callers that require a record to pass validation."""
