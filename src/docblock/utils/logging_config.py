# docblock/utils/logging_config.py
"""docblock.utils.logging_config
===============================

Logging configuration for docblock. It defines the global logger objects and a
single setup function, `setup_logging`, which configures the handlers and log
levels from the application configuration dictionary.

Features:
    - Rotating file logging for general events (docblock.log).
    - Optional console logging to stderr with configurable log level.
    - Optional separate error log file (error.log) for ERROR and CRITICAL events.
    - Optional decision tracing (trace.log) enabled via the DOCBLOCK_TRACE
      environment variable; every block-context resolution is recorded.
    - Automatic creation of the log directory, with fallback to the system temp
      directory on failure.
    - Safe reconfiguration: clears existing handlers to avoid duplicate logs when
      called multiple times.

Usage:
    >>> from docblock.utils import logging_config
    >>> logging_config.setup_logging({"logging": {"console_level": "ERROR"}})

Globals:
    logger: Main application logger ("docblock").
    TRACE_LOGGER: Logger for block-context decisions ("docblock.trace").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
# Created at import-time, unconfigured until ``setup_logging()`` runs.
logger = logging.getLogger("docblock")
TRACE_LOGGER = logging.getLogger("docblock.trace")

TRACE_ENV_VAR = "DOCBLOCK_TRACE"


def _log_path(log_dir: str, filename: str) -> str:
    """Joins `filename` onto `log_dir`, creating the directory or falling back to the temp dir."""
    if not log_dir:
        return filename
    if not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError as e_mkdir:
            print(f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr)
            fallback = os.path.join(tempfile.gettempdir(), filename)
            print(f"Logging to temporary file: '{fallback}'", file=sys.stderr)
            return fallback
    return os.path.join(log_dir, filename)


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to four independent handlers are set up:

    1. File handler: rotating docblock.log capturing everything from
       `file_level` (default DEBUG) upward.
    2. Console handler: optional `stderr` output whose threshold is
       `console_level` (default WARNING).
    3. Error-file handler: optional rotating error.log that stores only ERROR
       and CRITICAL events.
    4. Trace handler: rotating trace.log attached to ``docblock.trace`` when
       ``DOCBLOCK_TRACE`` is set to ``1/true/yes``.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` section is consulted; recognised keys are
            ``file_level``, ``console_level``, ``log_to_console``,
            ``separate_error_log`` and ``log_dir``.

    Notes:
        The function never raises; I/O or permission errors are reported to
        stderr and logging continues with a best-effort configuration.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})
    log_dir = logging_config.get("log_dir", "") or ""

    log_filename = _log_path(log_dir, "docblock.log")
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = None
    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_filename, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)
    except OSError as e_fh:
        print(
            f"Error setting up file logger for '{log_filename}': {e_fh}. File logging may be impaired.",
            file=sys.stderr,
        )

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", True):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_log_level = getattr(logging, console_level_str, logging.WARNING)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s"))
        console_handler.setLevel(console_log_level)

    # Optional Separate Error Log File
    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        error_log_filename = _log_path(log_dir, "error.log")
        try:
            error_file_handler = logging.handlers.RotatingFileHandler(
                error_log_filename,
                maxBytes=1 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
        except OSError as e_efh:
            print(
                f"Error setting up separate error log '{error_log_filename}': {e_efh}.",
                file=sys.stderr,
            )

    root_logger = logging.getLogger()
    root_logger.handlers = []  # Clear existing root handlers to avoid duplicates

    if file_handler:
        root_logger.addHandler(file_handler)
    if console_handler:
        root_logger.addHandler(console_handler)
    if error_file_handler:
        root_logger.addHandler(error_file_handler)

    root_logger.setLevel(log_file_level)

    # Decision trace logger
    TRACE_LOGGER.propagate = False
    TRACE_LOGGER.setLevel(logging.DEBUG)
    TRACE_LOGGER.handlers = []

    if os.environ.get(TRACE_ENV_VAR, "").lower() in {"1", "true", "yes"}:
        trace_filename = _log_path(log_dir, "trace.log")
        try:
            trace_handler = logging.handlers.RotatingFileHandler(
                trace_filename,
                maxBytes=1 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            TRACE_LOGGER.addHandler(trace_handler)
            TRACE_LOGGER.disabled = False
            logging.info("Decision tracing enabled, logging to '%s'.", trace_filename)
        except OSError as e_trace:
            logging.error(f"Failed to set up decision trace logging: {e_trace}", exc_info=True)
            TRACE_LOGGER.disabled = True
    else:
        TRACE_LOGGER.addHandler(logging.NullHandler())
        TRACE_LOGGER.disabled = True
        logging.debug("Decision tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logging.info(
            f"File logging to '{log_filename}' at level: {logging.getLevelName(file_handler.level)}."
        )
    if console_handler:
        logging.info(
            f"Console logging to stderr at level: {logging.getLevelName(console_handler.level)}."
        )
    if error_file_handler:
        logging.info("Error logging to 'error.log' at level: ERROR.")
