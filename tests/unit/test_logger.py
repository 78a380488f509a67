import logging
from collections.abc import Generator

import pytest

from pdfhub.logging.logger import Log


@pytest.fixture
def fresh_logger() -> Generator[logging.Logger, None, None]:
    logger = logging.getLogger("pdfhub")
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    saved_propagate = logger.propagate
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)
    logger.propagate = saved_propagate


class TestConfigure:
    def test_sets_level_and_single_stdout_handler(self, fresh_logger: logging.Logger) -> None:
        Log.configure("debug")
        Log.configure("debug")

        assert fresh_logger.level == logging.DEBUG
        assert len(fresh_logger.handlers) == 1
        assert fresh_logger.propagate is False

    def test_library_loggers_stay_at_warning(self, fresh_logger: logging.Logger) -> None:
        Log.configure("DEBUG")

        assert logging.getLogger("pdfminer").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING


class TestMessages:
    def test_messages_reach_pdfhub_logger(
        self, fresh_logger: logging.Logger, caplog: pytest.LogCaptureFixture
    ) -> None:
        Log.configure("INFO")
        fresh_logger.addHandler(caplog.handler)
        with caplog.at_level(logging.INFO, logger="pdfhub"):
            Log.info("Stored 1 document(s)")
            Log.warning("Quota exceeded")

        assert [r.levelname for r in caplog.records] == ["INFO", "WARNING"]
        assert caplog.records[0].getMessage() == "Stored 1 document(s)"
