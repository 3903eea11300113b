"""Base classes for detectors.

A detector looks at a document and returns Issues. Rule-based detectors are
synchronous and pure (page texts in, issues out) so the orchestrator can run
them in worker threads; the model detector is async and defined separately.
"""

from abc import ABC, abstractmethod

from reviewer.core.errors import PipelineErrors
from reviewer.core.pipeline_logger import PipelineLogger
from reviewer.pydantic_models.issues import Issue


class Detector:
    """Shared plumbing: a name for logs and error records, and a logger.

    Each detector:
    - Has a name used in log lines and as the ErrorRecord source
    - Receives its logger from whoever builds it
    - Reports non-fatal problems to the run's PipelineErrors, if given one
    """

    name: str = "unnamed"

    def __init__(self, logger: PipelineLogger | None = None, errors: PipelineErrors | None = None):
        """Initialize the detector.

        Args:
            logger: Run logger. A console logger is created if omitted.
            errors: Error ledger for the current run.
        """
        self.logger = logger or PipelineLogger()
        self.errors = errors if errors is not None else PipelineErrors()

    def log(self, message: str, level: str = "info", **data):
        """Log a message with detector context."""
        if level == "debug":
            self.logger.debug(f"[{self.name}] {message}", **data)
        elif level == "warning":
            self.logger.warning(f"[{self.name}] {message}", **data)
        elif level == "error":
            self.logger.error(f"[{self.name}] {message}", **data)
        else:
            self.logger.info(f"[{self.name}] {message}", **data)


class RuleDetector(Detector, ABC):
    """A deterministic detector over page texts."""

    @abstractmethod
    def detect(self, pages: list[str]) -> list[Issue]:
        """Scan pages (``pages[0]`` is page 1) and return issues in emission order."""
        pass
