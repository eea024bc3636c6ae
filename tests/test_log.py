"""Tests for taskfoundry.log module."""

import logging

from taskfoundry.log import EchoHandler, LOGGER_NAME, setup_logging


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_info_by_default(self):
        logger = setup_logging()

        assert logger.name == LOGGER_NAME
        assert logger.level == logging.INFO

    def test_verbose_is_debug(self):
        assert setup_logging(verbose=True).level == logging.DEBUG
        setup_logging()

    def test_handler_added_once(self):
        setup_logging()
        logger = setup_logging()

        handlers = [h for h in logger.handlers if isinstance(h, EchoHandler)]
        assert len(handlers) == 1

    def test_messages_go_to_stderr(self, capsys):
        setup_logging().info("Trying Groq (llama-3.3-70b-versatile)...")

        captured = capsys.readouterr()
        assert "Trying Groq" in captured.err
        assert captured.out == ""
