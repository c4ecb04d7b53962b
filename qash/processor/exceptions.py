class ProcessorError(Exception):
    """Base exception for batch orchestration errors."""


class FileDeadlineExceededError(ProcessorError):
    """Raised when a file's processing budget runs out or it is cancelled."""
