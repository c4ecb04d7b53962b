import time
from collections.abc import Callable

from qash.analysis.client_base import BaseCompletionClient
from qash.analysis.exceptions import AnalysisNetworkError
from qash.logging.logger import Log


class RetryingCompletionClient(BaseCompletionClient):
    """Retries transient completion failures with exponential backoff.

    ``max_attempts`` counts the first call. When the caller passes a timeout,
    it is treated as the budget for all attempts and their sleeps together.
    """

    def __init__(
        self,
        client: BaseCompletionClient,
        *,
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._max_attempts = max(1, max_attempts)
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep
        self._clock = clock

    def create_completion(
        self,
        *,
        model: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
        timeout_seconds: float | None = None,
    ) -> str:
        deadline = None if timeout_seconds is None else self._clock() + timeout_seconds
        attempt = 1
        while True:
            try:
                return self._client.create_completion(
                    model=model,
                    prompt=prompt,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    timeout_seconds=self._remaining(deadline),
                )
            except AnalysisNetworkError as exc:
                delay = self._backoff_seconds * 2 ** (attempt - 1)
                if attempt >= self._max_attempts or not self._has_time_for(deadline, delay):
                    Log.error(f"Completion call failed after {attempt} attempt(s): {exc}")
                    raise
                Log.warning(
                    f"Completion call failed (attempt {attempt}/{self._max_attempts}), "
                    f"retrying in {delay:.1f}s: {exc}"
                )
                self._sleep(delay)
                attempt += 1

    def _remaining(self, deadline: float | None) -> float | None:
        if deadline is None:
            return None
        return max(0.0, deadline - self._clock())

    def _has_time_for(self, deadline: float | None, delay: float) -> bool:
        if deadline is None:
            return True
        return deadline - self._clock() > delay
