"""Structured logging for the review pipeline.

Provides consistent logging with:
- Timestamps
- Log levels (DEBUG, INFO, WARNING, ERROR)
- Stage tracking with elapsed times
- Structured key=value data
- Optional per-run log file
"""

import itertools
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any

_RUN_IDS = itertools.count(1)


class PipelineLogger:
    """Structured logger for one review run.

    Created by the orchestrator (or CLI) and passed to whatever needs it;
    there is no process-wide instance.
    """

    def __init__(
        self,
        name: str = "reviewer",
        verbose: bool = False,
        log_dir: str | Path | None = None,
        console: bool = True,
    ):
        """Initialize the pipeline logger.

        Args:
            name: Logger name.
            verbose: If True, show DEBUG level logs.
            log_dir: Directory for log files. If None, no file logging.
            console: Attach a console handler when the named logger has none.
        """
        self.logger = logging.getLogger(name)
        self.verbose = verbose
        self._stage: str = ""
        self._stage_start: float = 0
        self._run_start: float = 0
        self._log_file: Path | None = None
        self._file_handler: logging.FileHandler | None = None
        self._log_dir = Path(log_dir) if log_dir else None

        if console and not self.logger.handlers:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(ConsoleFormatter())
            console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
            self.logger.addHandler(console_handler)

        self.logger.setLevel(logging.DEBUG)

    @property
    def log_file(self) -> Path | None:
        return self._log_file

    def for_run(self) -> "PipelineLogger":
        """A logger for one review run.

        It has its own timers and its own log file, and writes through a child
        of this logger so console output still goes to this logger's handlers.
        Concurrent runs must each use their own.
        """
        return PipelineLogger(
            name=f"{self.logger.name}.run{next(_RUN_IDS)}",
            verbose=self.verbose,
            log_dir=self._log_dir,
            console=False,
        )

    def _ts(self) -> str:
        return datetime.now().strftime("%H:%M:%S")

    def _elapsed(self) -> str:
        if self._stage_start:
            return f"{time.time() - self._stage_start:.1f}s"
        return ""

    def _total_elapsed(self) -> str:
        if self._run_start:
            elapsed = time.time() - self._run_start
            mins = int(elapsed // 60)
            secs = elapsed % 60
            if mins > 0:
                return f"{mins}m {secs:.0f}s"
            return f"{secs:.1f}s"
        return ""

    def start_review(self, file_name: str, method: str = ""):
        """Mark run start and set up file logging."""
        self._run_start = time.time()

        if self._log_dir:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            stem = Path(file_name).stem
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self._log_file = self._log_dir / f"{stem}_{timestamp}.log"

            self._file_handler = logging.FileHandler(self._log_file, encoding="utf-8")
            self._file_handler.setFormatter(FileFormatter())
            self._file_handler.setLevel(logging.DEBUG)
            self.logger.addHandler(self._file_handler)

        suffix = f" ({method})" if method else ""
        self.logger.info(f"[{self._ts()}] Reviewing: {file_name}{suffix}")

    def end_review(self, success: bool = True, stats: dict | None = None):
        """Mark run end and release the log file."""
        elapsed = self._total_elapsed()
        status = "COMPLETE" if success else "FAILED"

        if stats:
            self.summary(stats)

        self.logger.info(f"Review {status} [{elapsed}]")
        if self._log_file:
            self.logger.info(f"Log: {self._log_file}")

        if self._file_handler:
            self._file_handler.close()
            self.logger.removeHandler(self._file_handler)
            self._file_handler = None

    def start_stage(self, stage: str, detail: str = ""):
        """Start a named stage (extraction, detection, enrichment...)."""
        self._stage = stage
        self._stage_start = time.time()
        header = stage.upper()
        if detail:
            header += f" ({detail})"
        self.logger.info(header)

    def stage_result(self, result: str, **metrics):
        """Log stage completion with key metrics."""
        parts = [result]
        if metrics:
            parts.append(", ".join(f"{k}={v}" for k, v in metrics.items()))
        elapsed = self._elapsed()
        if elapsed:
            parts.append(f"[{elapsed}]")
        self.logger.info(f"  Done: {' | '.join(parts)}")
        self._stage = ""

    def debug(self, message: str, **data):
        """Log debug message (only in verbose mode)."""
        if data:
            message = f"{message} | {_format_data(data)}"
        self.logger.debug(f"[{self._ts()}] {message}")

    def info(self, message: str, **data):
        if data:
            message = f"{message} | {_format_data(data)}"
        self.logger.info(f"  {message}")

    def warning(self, message: str, **data):
        if data:
            message = f"{message} | {_format_data(data)}"
        self.logger.warning(f"[{self._ts()}] WARN: {message}")

    def error(self, message: str, exc: Exception | None = None, **data):
        if data:
            message = f"{message} | {_format_data(data)}"
        if exc:
            message = f"{message} | {type(exc).__name__}: {exc}"
        self.logger.error(f"[{self._ts()}] ERROR: {message}")

    def summary(self, stats: dict):
        """Log a summary block for end-of-run stats."""
        lines = ["SUMMARY"]
        for key, value in stats.items():
            if isinstance(value, dict):
                lines.append(f"  {key}:")
                for k, v in value.items():
                    lines.append(f"    {k}: {v}")
            else:
                lines.append(f"  {key}: {value}")
        self.logger.info("\n".join(lines))


class ConsoleFormatter(logging.Formatter):
    """Console formatter - concise."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


class FileFormatter(logging.Formatter):
    """File formatter - includes full details for analysis."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        level = record.levelname[:4]
        return f"{ts} [{level}] {record.getMessage()}"


def _format_data(data: dict[str, Any]) -> str:
    """Format structured data for logging."""
    parts = []
    for k, v in data.items():
        if isinstance(v, str) and len(v) > 50:
            v = v[:47] + "..."
        elif isinstance(v, list) and len(v) > 5:
            v = f"[{len(v)} items]"
        parts.append(f"{k}={v}")
    return ", ".join(parts)
