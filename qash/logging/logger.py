import logging
import sys

_PREVIEW_CHARS = 100


class Log:
    """Process-wide logging facade for the qash service.

    Keyword arguments are rendered as ``key=value`` pairs after the message so
    per-file log lines stay greppable by file name.
    """

    _logger: logging.Logger = logging.getLogger("qash")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level and attach a single stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        cls._logger.info(cls._render(message, context))

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        cls._logger.error(cls._render(message, context))

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        cls._logger.warning(cls._render(message, context))

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        cls._logger.debug(cls._render(message, context))

    @staticmethod
    def preview(text: str, limit: int = _PREVIEW_CHARS) -> str:
        """Shorten text for log output, marking the cut with an ellipsis."""
        if len(text) <= limit:
            return text
        return text[:limit] + "..."

    @staticmethod
    def _render(message: str, context: dict[str, object]) -> str:
        if not context:
            return message
        pairs = " ".join(f"{key}={value!r}" for key, value in context.items())
        return f"{message} {pairs}"
