"""Page screenshots for issue enrichment.

Renders a PDF page to a JPEG data URL with PyMuPDF. Rendering is
best-effort: any failure yields None and never aborts an analysis.
"""

import base64
import logging

import fitz  # PyMuPDF

from reviewer.core.config import ScreenshotConfig
from reviewer.core.errors import PipelineErrors, screenshot_error
from reviewer.pydantic_models.issues import Issue

logger = logging.getLogger(__name__)


class PageScreenshotter:
    """Renders pages of one PDF, caching each page's image.

    Usage:
        with PageScreenshotter(pdf_bytes) as shots:
            url = shots.screenshot(3)
    """

    def __init__(self, data: bytes, scale: float = ScreenshotConfig.SCALE):
        self.data = data
        self.scale = scale
        self._doc: fitz.Document | None = None
        self._cache: dict[int, str | None] = {}

    def _open(self) -> fitz.Document:
        if self._doc is None:
            self._doc = fitz.open(stream=self.data, filetype="pdf")
        return self._doc

    def render(self, page_num: int) -> str:
        """Render a page (1-indexed) to a JPEG data URL.

        Raises:
            ValueError: Page out of range.
        """
        doc = self._open()
        if page_num < 1 or page_num > len(doc):
            raise ValueError(f"Page {page_num} does not exist (document has {len(doc)} pages)")
        pix = doc[page_num - 1].get_pixmap(matrix=fitz.Matrix(self.scale, self.scale))
        image = pix.tobytes("jpeg", jpg_quality=ScreenshotConfig.JPEG_QUALITY)
        return f"data:image/jpeg;base64,{base64.b64encode(image).decode('ascii')}"

    def screenshot(self, page_num: int, errors: PipelineErrors | None = None) -> str | None:
        """Data URL for a page, or None if it could not be rendered."""
        if page_num in self._cache:
            return self._cache[page_num]
        try:
            url = self.render(page_num)
        except Exception as e:
            logger.warning("Screenshot failed for page %d: %s", page_num, e)
            if errors is not None:
                errors.add(screenshot_error(page_num, original=e))
            url = None
        self._cache[page_num] = url
        return url

    def enrich(self, issues: list[Issue], errors: PipelineErrors | None = None) -> list[Issue]:
        """Copies of ``issues`` with screenshots attached where rendering worked."""
        return [issue.with_screenshot(self.screenshot(issue.page, errors)) for issue in issues]

    def close(self):
        if self._doc is not None:
            self._doc.close()
            self._doc = None

    def __enter__(self):
        return self

    def __exit__(self, _exc_type, _exc_val, _exc_tb):
        self.close()
        return False
