"""Logging setup for the taskfoundry CLI."""

import logging

import typer

LOGGER_NAME = "taskfoundry"


class EchoHandler(logging.Handler):
    """Write log records to stderr through typer.echo."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            typer.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Show taskfoundry progress notices on stderr.

    Args:
        verbose: Include debug messages.

    Returns:
        The configured "taskfoundry" logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not any(isinstance(h, EchoHandler) for h in logger.handlers):
        handler = EchoHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    return logger
