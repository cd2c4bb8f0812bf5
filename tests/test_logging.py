"""Tests for logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from jira_watch.logging_config import get_logger, setup_logging


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    logging.getLogger("jira_watch").setLevel(logging.NOTSET)


class TestSetupLogging:
    @pytest.mark.parametrize(
        "verbosity,level",
        [("quiet", logging.ERROR), ("normal", logging.WARNING), ("verbose", logging.DEBUG)],
    )
    def test_levels(self, restore_root_logging, verbosity, level):
        logger = setup_logging(verbosity)
        assert logger.name == "jira_watch"
        assert logger.level == level
        assert any(isinstance(h, RichHandler) for h in logging.getLogger().handlers)

    def test_httpx_quiet_unless_verbose(self, restore_root_logging):
        setup_logging("normal")
        assert logging.getLogger("httpx").level == logging.WARNING
        setup_logging("verbose")
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_log_file(self, restore_root_logging, tmp_path):
        log_file = tmp_path / "jira-watch.log"
        setup_logging("verbose", log_file=str(log_file))
        get_logger("jira_watch.storage.store").debug("Saved query '%s'", "my-bugs")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "Saved query 'my-bugs'" in log_file.read_text(encoding="utf-8")


class TestGetLogger:
    def test_namespaced(self):
        assert get_logger("jira_watch.service").name == "jira_watch.service"
        assert get_logger("service").name == "jira_watch.service"
        assert get_logger().name == "jira_watch"
