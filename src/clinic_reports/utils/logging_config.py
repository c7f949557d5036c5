"""Logging setup for clinic reports.

The package logs under a single ``clinic_reports`` logger: always to a log
file, and to the terminal through rich when the CLI runs with ``-v``.
"""

import logging
import time
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "clinic_reports"
DEFAULT_LOG_FILE = "clinic_reports.log"

# Context keys never written to the log; exports can carry patient data
MASKED_KEYS = frozenset({"patient", "patient_name", "email", "phone", "dni", "notes"})
MASK = "***"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def mask_context(context: dict[str, object]) -> dict[str, object]:
    """Replace the values of patient-identifying keys with a mask.

    Args:
        context: Key/value pairs about to be logged.

    Returns:
        Copy of ``context`` with masked keys hidden.
    """
    return {k: MASK if k.lower() in MASKED_KEYS else v for k, v in context.items()}


def format_context(context: dict[str, object]) -> str:
    """Render context as ``key=value`` pairs in insertion order."""
    return ", ".join(f"{k}={v}" for k, v in mask_context(context).items())


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    console_output: bool = True,
) -> logging.Logger:
    """Configure the package logger.

    Calling it again replaces the previous handlers, so the CLI can reconfigure
    once the settings file is known.

    Args:
        level: Log level name; unknown names fall back to INFO.
        log_file: Log file path (parent directories are created).
            Defaults to DEFAULT_LOG_FILE in the working directory.
        console_output: Also log to stderr through a rich handler.

    Returns:
        The ``clinic_reports`` logger.
    """
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    log_path = Path(log_file if log_file is not None else DEFAULT_LOG_FILE)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(numeric_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(file_handler)

    if console_output:
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            log_time_format="[%X]",
        )
        console_handler.setLevel(numeric_level)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger under the ``clinic_reports`` hierarchy.

    Args:
        name: Module name (typically __name__).
    """
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class LogContext:
    """Time an operation and log its inputs, results and failures.

    Example::

        with LogContext(logger, "report generation", period="2025-03") as ctx:
            rows = fetch()
            ctx.add(rows=len(rows))
    """

    def __init__(
        self,
        logger: logging.Logger,
        operation: str,
        level: int = logging.DEBUG,
        **context: object,
    ):
        """Initialize log context.

        Args:
            logger: Logger instance to use.
            operation: Name of the operation being performed.
            level: Level of the completion message.
            **context: Inputs to include in the start message.
        """
        self.logger = logger
        self.operation = operation
        self.level = level
        self.context = context
        self.results: dict[str, object] = {}
        self.elapsed: float | None = None
        self._started = 0.0

    def add(self, **results: object) -> None:
        """Record results to report when the operation completes."""
        self.results.update(results)

    def __enter__(self) -> "LogContext":
        self.logger.debug(f"Starting {self.operation}: {format_context(self.context)}")
        self._started = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> bool:
        self.elapsed = time.perf_counter() - self._started
        if exc_type is not None:
            self.logger.error(
                f"Error in {self.operation} after {self.elapsed:.3f}s: "
                f"{exc_type.__name__}: {exc_val}",
                exc_info=True,
            )
        else:
            summary = format_context(self.results)
            suffix = f": {summary}" if summary else ""
            self.logger.log(self.level, f"Completed {self.operation} in {self.elapsed:.3f}s{suffix}")
        return False
