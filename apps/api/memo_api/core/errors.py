"""Errors raised by the external service wrappers."""


class MemoServiceError(Exception):
    """Base class for failures of an external dependency."""


class StorageError(MemoServiceError):
    """Object storage rejected a request."""


class TranscriptionError(MemoServiceError):
    """The transcription provider returned an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
