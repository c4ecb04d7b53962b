import time
from collections.abc import Callable

from qash.processor.exceptions import FileDeadlineExceededError


class CancellationToken:
    """Per-file deadline plus an explicit cancel flag.

    Steps call ``raise_if_cancelled`` between stages; blocking calls receive
    ``remaining_seconds()`` as their timeout.
    """

    def __init__(
        self,
        deadline_seconds: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._deadline = None if deadline_seconds is None else clock() + deadline_seconds
        self._cancelled = False

    @classmethod
    def unbounded(cls) -> "CancellationToken":
        return cls(None)

    def cancel(self) -> None:
        self._cancelled = True

    def remaining_seconds(self) -> float | None:
        """Seconds left before the deadline; ``None`` when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def raise_if_cancelled(self, stage: str) -> None:
        if self._cancelled:
            raise FileDeadlineExceededError(f"Processing cancelled before {stage}")
        if self._deadline is not None and self._clock() >= self._deadline:
            raise FileDeadlineExceededError(f"Processing deadline exceeded before {stage}")
