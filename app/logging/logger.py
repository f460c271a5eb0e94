import logging
import sys


class _SessionContextFilter(logging.Filter):
    """Fill in ``session_id`` for records logged without one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = "-"
        return True


class Log:
    """Centralized logging with structured format.

    Keyword arguments become record attributes, so
    ``Log.info("...", session_id=sid)`` tags the line with the conversation.
    """

    FORMAT = "%(asctime)s [%(levelname)s] [session=%(session_id)s] %(message)s"

    _logger: logging.Logger = logging.getLogger("phone_agent")
    _logger.addFilter(_SessionContextFilter())

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(cls.FORMAT))
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)
