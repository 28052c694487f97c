import logging

import pytest

from docbatch.logging.logger import Log


class TestLog:
    def test_configure_attaches_one_handler(self) -> None:
        Log.configure("INFO")
        Log.configure("DEBUG")

        logger = logging.getLogger("docbatch")
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_messages_go_to_docbatch_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        Log.configure("DEBUG")
        with caplog.at_level(logging.DEBUG, logger="docbatch"):
            Log.warning("Batch b1 failed", batch_id="b1")

        record = caplog.records[-1]
        assert record.name == "docbatch"
        assert record.levelno == logging.WARNING
        assert record.getMessage() == "Batch b1 failed"
        assert record.batch_id == "b1"

    def test_exception_includes_traceback(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="docbatch"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                Log.exception("Unexpected error")

        assert caplog.records[-1].exc_info is not None
