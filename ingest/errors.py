"""Ingestion error taxonomy"""


class IngestionError(ValueError):
    """Base class for failures that prevent a dataset from being produced."""


class EmptyInputError(IngestionError):
    """Raised when there are no rows to analyze."""


class MalformedInputError(IngestionError):
    """Raised when raw text or records cannot be turned into a table."""
