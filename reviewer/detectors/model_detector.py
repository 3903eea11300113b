"""Model-based detector.

Sends the document (extracted text, or the original PDF as a base64 file
part) to a model with the analysis prompt and normalizes the JSON reply.

Contract with the model is strict:
- The call races a hard deadline; on expiry it is cancelled and
  ModelTimeoutError is raised.
- Code fences are stripped, then the reply must parse as a JSON object,
  otherwise ModelResponseError is raised with the raw text.
- No retry here. An empty issue list is a valid answer.
"""

import asyncio
import json
from typing import Any

from reviewer.core.config import ModelConfig
from reviewer.core.errors import (
    ModelResponseError,
    ModelTimeoutError,
    llm_parse_error,
    timeout_error,
)
from reviewer.core.llm_client import LLMClient, strip_code_fences
from reviewer.core.result_normalizer import normalize_result
from reviewer.detectors.base import Detector
from reviewer.prompts.analysis_prompt import build_analysis_prompt, build_analysis_user_prompt
from reviewer.pydantic_models.issues import AnalysisResult


def parse_model_response(raw: str, file_name: str) -> AnalysisResult:
    """Strictly parse a model reply into a normalized AnalysisResult.

    Raises:
        ModelResponseError: The reply is not a JSON object.
    """
    cleaned = strip_code_fences(raw)
    try:
        parsed: Any = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ModelResponseError(f"Model returned invalid JSON: {e}", raw_response=raw) from e
    if not isinstance(parsed, dict):
        raise ModelResponseError(
            f"Model returned JSON {type(parsed).__name__}, expected an object",
            raw_response=raw,
        )
    return normalize_result(parsed, file_name)


class ModelDetector(Detector):
    """Runs the analysis prompt against a model.

    Usage:
        detector = ModelDetector(client, logger=run_logger, errors=run_errors)
        result = await detector.analyze_text(text, "sub_doc.pdf", model=FAST_MODEL)
        result = await detector.analyze_pdf(pdf_bytes, "sub_doc.pdf", model=DOCUMENT_MODEL)
    """

    name = "model"

    def __init__(self, client: LLMClient, timeout_seconds: float = ModelConfig.TIMEOUT_SECONDS, **kwargs):
        super().__init__(**kwargs)
        self.client = client
        self.timeout_seconds = timeout_seconds

    async def analyze_text(
        self,
        text: str,
        file_name: str,
        model: str,
        was_sanitized: bool = False,
    ) -> AnalysisResult:
        """Analyze extracted text (in-house model path)."""
        return await self._analyze(
            file_name=file_name,
            model=model,
            system_prompt=build_analysis_prompt(was_sanitized),
            user_prompt=build_analysis_user_prompt(file_name, text),
        )

    async def analyze_pdf(self, pdf_bytes: bytes, file_name: str, model: str) -> AnalysisResult:
        """Analyze the original PDF (external model path)."""
        return await self._analyze(
            file_name=file_name,
            model=model,
            system_prompt=build_analysis_prompt(),
            user_prompt=build_analysis_user_prompt(file_name),
            pdf_bytes=pdf_bytes,
        )

    async def _analyze(
        self,
        file_name: str,
        model: str,
        system_prompt: str,
        user_prompt: str,
        pdf_bytes: bytes | None = None,
    ) -> AnalysisResult:
        self.log(f"Calling {model}", level="debug", file=file_name, attached_pdf=pdf_bytes is not None)
        call = self.client.complete_text(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            model=model,
            component="model_detector",
            pdf_bytes=pdf_bytes,
            temperature=ModelConfig.TEMPERATURE,
            max_tokens=ModelConfig.MAX_TOKENS,
        )

        try:
            raw = await asyncio.wait_for(call, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            self.log(f"No reply within {self.timeout_seconds}s", level="error")
            self.errors.add(timeout_error("detection", self.timeout_seconds))
            raise ModelTimeoutError(self.timeout_seconds) from e

        try:
            result = parse_model_response(raw, file_name)
        except ModelResponseError as e:
            self.log(f"Unparseable reply: {e}", level="error", raw=raw)
            self.errors.add(llm_parse_error(str(e), stage="detection", raw_response=raw))
            raise

        self.log(f"{result.summary.issue_count} issues from model", level="debug")
        return result
