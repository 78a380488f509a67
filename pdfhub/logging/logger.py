import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

# pdfplumber logs every parsed object through pdfminer at DEBUG
NOISY_LIBRARY_LOGGERS = ("pdfminer", "httpx", "httpcore", "urllib3")


class Log:
    """Application log for pdfhub, written to stdout."""

    _logger: logging.Logger = logging.getLogger("pdfhub")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the pdfhub level and attach the stdout handler once.

        Third-party loggers in NOISY_LIBRARY_LOGGERS are held at WARNING
        so that LOG_LEVEL=DEBUG shows pdfhub's own debug output only.
        """
        cls._logger.setLevel(log_level.upper())
        cls._logger.propagate = False
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            cls._logger.addHandler(handler)
        for name in NOISY_LIBRARY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    @classmethod
    def info(cls, message: str) -> None:
        cls._logger.info(message)

    @classmethod
    def error(cls, message: str) -> None:
        cls._logger.error(message)

    @classmethod
    def exception(cls, message: str) -> None:
        """Log at ERROR with the active exception's traceback."""
        cls._logger.exception(message)

    @classmethod
    def warning(cls, message: str) -> None:
        cls._logger.warning(message)

    @classmethod
    def debug(cls, message: str) -> None:
        cls._logger.debug(message)
