"""Persistence for analysis results.

The pipeline only needs ``save(result) -> id``. Callers supply any object
with that method; ``JsonResultStore`` writes one JSON file per analysis.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from reviewer.pydantic_models.issues import AnalysisResult

logger = logging.getLogger(__name__)


class ResultStore(Protocol):
    """Anything that can persist an AnalysisResult and hand back an id."""

    def save(self, result: AnalysisResult) -> str:
        ...


class JsonResultStore:
    """Writes ``<directory>/<file stem>_<id>.json``.

    Each file holds the wire-format result plus the save time, so the
    directory doubles as a review history.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, result: AnalysisResult, document_id: str) -> Path:
        stem = Path(result.file_name).stem or "document"
        return self.directory / f"{stem}_{document_id}.json"

    def save(self, result: AnalysisResult) -> str:
        """Write the result and return its id.

        Raises:
            OSError: The directory or file could not be written.
        """
        document_id = uuid.uuid4().hex[:12]
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = {
            "id": document_id,
            "savedAt": datetime.now(timezone.utc).isoformat(),
            "result": result.to_wire(),
        }
        path = self.path_for(result, document_id)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        logger.debug("Saved analysis for %s to %s", result.file_name, path)
        return document_id

    def load(self, document_id: str) -> AnalysisResult:
        """Load a saved result by id.

        Raises:
            FileNotFoundError: No saved result has this id.
        """
        matches = sorted(self.directory.glob(f"*_{document_id}.json"))
        if not matches:
            raise FileNotFoundError(f"No saved result with id {document_id} in {self.directory}")
        with open(matches[0], encoding="utf-8") as f:
            payload = json.load(f)
        return AnalysisResult.model_validate(payload["result"])

    def list_ids(self) -> list[str]:
        """Ids of all saved results, oldest file first."""
        files = sorted(self.directory.glob("*_*.json"), key=lambda p: p.stat().st_mtime)
        return [p.stem.rsplit("_", 1)[-1] for p in files]
