"""Review orchestrator: one PDF in, one AnalysisResult out.

Composition root for a review. It builds the detectors a processing method
needs, runs them concurrently, merges their output, and then (optionally)
attaches screenshots and persists the result.

High-level flow:
  Extraction → Detection (model ∥ cross-references ∥ numbering ∥ patterns)
  → Merge → Enrichment → Persistence

Every run owns its PipelineErrors, its copy of the rule set and its own run
logger (timers and log file), so one orchestrator can serve many documents
concurrently.
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

from reviewer.core.cost_tracker import CostTracker
from reviewer.core.errors import (
    PipelineErrors,
    detector_error,
    page_range_error,
    page_read_error,
    persistence_error,
)
from reviewer.core.config import ModelConfig, PageSplitConfig
from reviewer.core.llm_client import LLMClient
from reviewer.core.pdf_reader import PageExtractor
from reviewer.core.pipeline_logger import PipelineLogger
from reviewer.core.result_normalizer import merge_results
from reviewer.core.result_store import ResultStore
from reviewer.core.sanitizer import DocumentSanitizer
from reviewer.core.screenshots import PageScreenshotter
from reviewer.detectors import (
    CrossReferenceDetector,
    ModelDetector,
    NumberingDetector,
    PatternDetector,
    PatternRuleSet,
    RuleDetector,
    build_section_index,
)
from reviewer.pydantic_models.issues import AnalysisResult, Issue, IssueType
from reviewer.pydantic_models.processing import (
    CompanyLLM,
    ExternalAI,
    LocalPatterns,
    ManualOnly,
    ProcessingMethod,
    parse_processing_method,
)

MANUAL_REVIEW_ISSUE = Issue(
    page=1,
    type=IssueType.OTHER,
    message="Document uploaded for manual review only",
    original="",
    suggestion="Please review this document manually",
    location_hint="Manual review required",
)


@dataclass
class ReviewOutcome:
    """Everything one run produced.

    ``result`` is always the in-memory analysis, even when saving failed.
    """

    result: AnalysisResult
    method: str
    errors: PipelineErrors = field(default_factory=PipelineErrors)
    document_id: str | None = None
    saved: bool = False
    save_error: str | None = None
    redactions: list[dict] = field(default_factory=list)
    log_file: Path | None = None

    def to_dict(self) -> dict:
        return {
            "result": self.result.to_wire(),
            "method": self.method,
            "documentId": self.document_id,
            "saved": self.saved,
            "saveError": self.save_error,
            "redactions": self.redactions,
            "logFile": str(self.log_file) if self.log_file else None,
            "errors": self.errors.to_dict(),
        }


class ReviewOrchestrator:
    """Runs one processing method over one document per call to ``run()``."""

    def __init__(
        self,
        client: LLMClient | None = None,
        logger: PipelineLogger | None = None,
        rule_set: PatternRuleSet | None = None,
        store: ResultStore | None = None,
        screenshots: bool = False,
        timeout_seconds: float = ModelConfig.TIMEOUT_SECONDS,
        verbose: bool = False,
        log_dir: str | Path | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            client: LLM client for model-based methods. Built with a fresh
                    CostTracker if omitted.
            logger: Run logger. Built from verbose/log_dir if omitted.
            rule_set: Pattern rules; each run works on a copy.
            store: Where to persist results. Nothing is saved if omitted.
            screenshots: Attach a rendered page image to every issue.
            timeout_seconds: Deadline for a model call.
            verbose: If True, log at DEBUG level.
            log_dir: Directory for per-run log files.
        """
        self.client = client or LLMClient(cost_tracker=CostTracker())
        self.cost_tracker = self.client.cost_tracker
        self.logger = logger or PipelineLogger(verbose=verbose, log_dir=log_dir)
        self.rule_set = rule_set if rule_set is not None else PatternRuleSet()
        self.store = store
        self.screenshots = screenshots
        self.timeout_seconds = timeout_seconds

    async def review_file(self, path: str | Path, method: ProcessingMethod | str | dict = "local_patterns") -> ReviewOutcome:
        """Read a PDF from disk and review it."""
        path = Path(path)
        data = await asyncio.to_thread(path.read_bytes)
        return await self.run(data, path.name, method)

    async def run(
        self,
        pdf_bytes: bytes,
        file_name: str,
        method: ProcessingMethod | str | dict = "local_patterns",
    ) -> ReviewOutcome:
        """Review one document.

        Raises:
            ExtractionError: The PDF could not be read.
            ModelTimeoutError: The model missed its deadline.
            ModelResponseError: The model reply was not valid JSON.
        """
        if not isinstance(method, (CompanyLLM, ExternalAI, LocalPatterns, ManualOnly)):
            method = parse_processing_method(method)

        errors = PipelineErrors()
        outcome = ReviewOutcome(result=AnalysisResult(file_name=file_name), method=method.method, errors=errors)
        logger = self.logger.for_run()
        logger.start_review(file_name, method=method.method)
        outcome.log_file = logger.log_file

        try:
            outcome.result = await self._analyze(pdf_bytes, file_name, method, errors, outcome, logger)

            if self.screenshots and not isinstance(method, ManualOnly):
                outcome.result = await self._enrich(pdf_bytes, outcome.result, errors, logger)

            if self.store is not None:
                await self._persist(outcome, logger)

            logger.end_review(success=True, stats=self.get_stats(outcome))
            return outcome

        except Exception as e:
            logger.error("Review failed", exc=e)
            logger.end_review(success=False, stats=self.get_stats(outcome))
            raise

    # Dispatch

    async def _analyze(
        self,
        pdf_bytes: bytes,
        file_name: str,
        method: ProcessingMethod,
        errors: PipelineErrors,
        outcome: ReviewOutcome,
        logger: PipelineLogger,
    ) -> AnalysisResult:
        if isinstance(method, ManualOnly):
            logger.info("Manual review only, no automated detection")
            return AnalysisResult(file_name=file_name, issues=[MANUAL_REVIEW_ISSUE])

        pages = await self._extract(pdf_bytes, file_name, errors, logger)

        if isinstance(method, LocalPatterns):
            rule_lists = await self._run_rule_detectors(pages, errors, logger, method.disabled_rules)
            return merge_results(file_name, *rule_lists)

        model_detector = ModelDetector(
            self.client,
            timeout_seconds=self.timeout_seconds,
            logger=logger,
            errors=errors,
        )

        if isinstance(method, CompanyLLM):
            text = PageSplitConfig.PAGE_BREAK.join(pages)
            was_sanitized = False
            if method.sanitize:
                sanitized = DocumentSanitizer().sanitize(text)
                text = sanitized.sanitized_content
                was_sanitized = sanitized.was_sanitized
                outcome.redactions = sanitized.detected_patterns
                if was_sanitized:
                    logger.info("Sanitized document", redactions=sanitized.redaction_count)
            model_call = model_detector.analyze_text(text, file_name, method.model, was_sanitized=was_sanitized)
        else:
            model_call = model_detector.analyze_pdf(pdf_bytes, file_name, method.model)

        logger.start_stage("detection", detail=f"{method.method}, {method.model}")
        if method.include_rule_detectors:
            model_result, rule_lists = await asyncio.gather(
                model_call,
                self._run_rule_detectors(pages, errors, logger, [], log_stage=False),
            )
        else:
            model_result, rule_lists = await model_call, []

        model_issues = self._clamp_pages(model_result.issues, len(pages), errors, logger)
        result = merge_results(file_name, model_issues, *rule_lists)
        logger.stage_result("Detection complete", issues=len(result.issues))
        return result

    def _clamp_pages(
        self,
        issues: list[Issue],
        page_count: int,
        errors: PipelineErrors,
        logger: PipelineLogger,
    ) -> list[Issue]:
        """Model-reported pages past the end move to the last page."""
        clamped = []
        for issue in issues:
            if page_count and issue.page > page_count:
                logger.warning(f"Model reported page {issue.page}, document has {page_count}")
                errors.add(page_range_error(issue.page, page_count))
                issue = issue.model_copy(update={"page": page_count})
            clamped.append(issue)
        return clamped

    # Stages

    async def _extract(self, pdf_bytes: bytes, file_name: str, errors: PipelineErrors, logger: PipelineLogger) -> list[str]:
        logger.start_stage("extraction", detail=file_name)

        def read() -> tuple[list[str], list[int]]:
            with PageExtractor(pdf_bytes, file_name=file_name) as extractor:
                return list(extractor.pages), list(extractor.failed_pages)

        pages, failed = await asyncio.to_thread(read)
        for page in failed:
            errors.add(page_read_error(page, file_name))
        logger.stage_result("Text extracted", pages=len(pages), failed=len(failed))
        return pages

    async def _run_rule_detectors(
        self,
        pages: list[str],
        errors: PipelineErrors,
        logger: PipelineLogger,
        disabled_rules: list[str],
        log_stage: bool = True,
    ) -> list[list[Issue]]:
        """Cross-references, numbering and patterns, concurrently, in that order."""
        rule_set = self.rule_set.copy()
        for rule_id in disabled_rules:
            if not rule_set.toggle_rule(rule_id, False):
                logger.warning(f"Unknown pattern rule: {rule_id}")

        detector_kwargs = {"logger": logger, "errors": errors}
        cross_reference = CrossReferenceDetector(**detector_kwargs)
        numbering = NumberingDetector(**detector_kwargs)
        patterns = PatternDetector(rule_set=rule_set, **detector_kwargs)

        async def cross_references() -> list[Issue]:
            index = await asyncio.to_thread(build_section_index, pages, logger)
            return await self._guarded(cross_reference, errors, logger, pages, index=index)

        if log_stage:
            logger.start_stage("detection", detail="rule detectors")
        results = await asyncio.gather(
            cross_references(),
            self._guarded(numbering, errors, logger, pages),
            self._guarded(patterns, errors, logger, pages),
        )
        if log_stage:
            logger.stage_result("Detection complete", issues=sum(len(r) for r in results))
        return list(results)

    async def _guarded(
        self,
        detector: RuleDetector,
        errors: PipelineErrors,
        logger: PipelineLogger,
        pages: list[str],
        **kwargs,
    ) -> list[Issue]:
        """Run a rule detector in a worker thread; a failure excludes only that detector."""
        try:
            return await asyncio.to_thread(detector.detect, pages, **kwargs)
        except Exception as e:
            logger.warning(f"Detector {detector.name} failed: {e}")
            errors.add(detector_error(f"{type(e).__name__}: {e}", detector=detector.name, original=e))
            return []

    async def _enrich(
        self,
        pdf_bytes: bytes,
        result: AnalysisResult,
        errors: PipelineErrors,
        logger: PipelineLogger,
    ) -> AnalysisResult:
        logger.start_stage("enrichment", detail="screenshots")

        def render() -> list[Issue]:
            with PageScreenshotter(pdf_bytes) as screenshotter:
                return screenshotter.enrich(result.issues, errors)

        issues = await asyncio.to_thread(render)
        attached = sum(1 for issue in issues if issue.screenshot_url)
        logger.stage_result("Screenshots attached", attached=attached, issues=len(issues))
        return AnalysisResult(file_name=result.file_name, issues=issues)

    async def _persist(self, outcome: ReviewOutcome, logger: PipelineLogger):
        try:
            outcome.document_id = await asyncio.to_thread(self.store.save, outcome.result)
            outcome.saved = True
            logger.info("Saved", document_id=outcome.document_id)
        except Exception as e:
            outcome.save_error = f"{type(e).__name__}: {e}"
            outcome.errors.add(persistence_error(f"Could not save analysis: {e}", original=e))
            logger.warning(f"Could not save analysis: {e}")

    def get_stats(self, outcome: ReviewOutcome) -> dict:
        """Run statistics for the summary block."""
        by_type: dict[str, int] = {}
        for issue in outcome.result.issues:
            by_type[issue.type.value] = by_type.get(issue.type.value, 0) + 1
        stats = {
            "method": outcome.method,
            "issues": len(outcome.result.issues),
            "pages_affected": outcome.result.summary.pages_affected,
            "by_type": by_type,
            "saved": outcome.saved,
            "errors": outcome.errors.summary(),
        }
        if self.cost_tracker and self.cost_tracker.call_count:
            stats["cost"] = self.cost_tracker.to_dict()
        return stats
