class StorageError(Exception):
    """Base class for failures of the JSON record store."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(f"{name}: {message}")
        self.name = name


class StorageReadError(StorageError):
    """A document is missing, unreadable or not valid JSON."""


class StorageWriteError(StorageError):
    """A document could not be written to disk."""


class ValidationFailure(ValueError):
    """Caller input rejected before any store access."""
