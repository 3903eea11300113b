"""PDF text extraction for the review pipeline.

Pure Python + PyMuPDF.
"""

import logging
import math
from pathlib import Path

import fitz  # PyMuPDF

from reviewer.core.config import FileLimits, PageSplitConfig
from reviewer.core.errors import ExtractionError

logger = logging.getLogger(__name__)


def split_pages(text: str, chunk_size: int = PageSplitConfig.CHARS_PER_PAGE) -> list[str]:
    """Split extracted text into pages.

    Uses form-feed page breaks when present. Otherwise falls back to fixed
    chunks of ``chunk_size`` characters; page numbers are then approximate.

    The chunks partition the text exactly: joining them gives back the input,
    and there are ``ceil(len(text) / chunk_size)`` of them (one empty page
    for empty text).

    Args:
        text: Full document text.
        chunk_size: Characters per page in fallback mode.

    Returns:
        List of page strings.
    """
    if PageSplitConfig.PAGE_BREAK in text:
        return text.split(PageSplitConfig.PAGE_BREAK)

    if not text:
        return [""]

    page_count = math.ceil(len(text) / chunk_size)
    return [text[i * chunk_size:(i + 1) * chunk_size] for i in range(page_count)]


def page_for_offset(offset: int, pages: list[str], separator_len: int = 0) -> int:
    """Map an absolute character offset in the joined text to a 1-indexed page.

    Walks cumulative page lengths. An offset that falls on a separator
    belongs to the page before it; offsets past the end map to the last page.

    Args:
        offset: Character offset into ``separator.join(pages)``.
        pages: Page texts in order.
        separator_len: Length of the separator used when joining.
    """
    boundary = 0
    for i, page in enumerate(pages):
        boundary += len(page)
        if offset < boundary + separator_len or i == len(pages) - 1:
            return i + 1
        boundary += separator_len
    return max(1, len(pages))


class PageExtractor:
    """Converts PDF bytes into an ordered list of page texts.

    Physical PDF pages are the page boundaries. A single page that fails to
    extract yields an empty string so the rest of the document is still
    usable; a buffer that cannot be opened at all raises ExtractionError.

    Usage:
        extractor = PageExtractor.from_path("subscription_agreement.pdf")
        pages = extractor.pages
    """

    def __init__(self, data: bytes, file_name: str = "document.pdf"):
        """Open a PDF held in memory.

        Args:
            data: Raw PDF bytes.
            file_name: Name used in logs and results.

        Raises:
            ExtractionError: Empty, oversized, non-PDF, or unreadable buffer.
        """
        self.file_name = file_name
        self.data = data
        self.failed_pages: list[int] = []

        if not data:
            raise ExtractionError(f"{file_name}: empty file")
        if len(data) > FileLimits.MAX_FILE_SIZE:
            raise ExtractionError(
                f"{file_name}: {len(data)} bytes exceeds the {FileLimits.MAX_FILE_SIZE} byte limit"
            )

        if FileLimits.PDF_MAGIC not in data[:FileLimits.MAGIC_SEARCH_BYTES]:
            raise ExtractionError(f"{file_name}: not a PDF (no %PDF header)")

        try:
            self._doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise ExtractionError(f"{file_name}: cannot open PDF ({e})") from e

        if self._doc.needs_pass:
            self._doc.close()
            raise ExtractionError(f"{file_name}: PDF is password protected")

        self._pages: list[str] | None = None

    @classmethod
    def from_path(cls, path: str | Path) -> "PageExtractor":
        """Load a PDF from disk."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"PDF not found: {path}")
        return cls(path.read_bytes(), file_name=path.name)

    @property
    def page_count(self) -> int:
        """Total number of pages in the document."""
        return len(self._doc) if self._doc else 0

    @property
    def pages(self) -> list[str]:
        """Page texts, 0-indexed list (page N is ``pages[N - 1]``)."""
        if self._pages is None:
            self._pages = self._extract_pages()
        return self._pages

    def _extract_pages(self) -> list[str]:
        pages = []
        for i in range(self.page_count):
            try:
                pages.append(self._doc[i].get_text())
            except Exception as e:
                logger.warning("Text extraction failed for %s page %d: %s", self.file_name, i + 1, e)
                self.failed_pages.append(i + 1)
                pages.append("")
        return pages

    def read_page(self, page_num: int) -> str:
        """Read text from a single page (1-indexed).

        Args:
            page_num: Page number (1-indexed).

        Returns:
            Page text, or an empty string when out of range.
        """
        if page_num < 1 or page_num > self.page_count:
            return ""
        return self.pages[page_num - 1]

    def full_text(self) -> str:
        """Whole document with pages separated by form feeds."""
        return PageSplitConfig.PAGE_BREAK.join(self.pages)

    def close(self):
        """Close the document."""
        if self._doc:
            self._doc.close()
            self._doc = None

    def __enter__(self):
        return self

    def __exit__(self, _exc_type, _exc_val, _exc_tb):
        self.close()
        return False


def extract_pages(data: bytes, file_name: str = "document.pdf") -> list[str]:
    """Convenience function: PDF bytes to page texts.

    Raises:
        ExtractionError: If the buffer cannot be read as a PDF.
    """
    with PageExtractor(data, file_name=file_name) as extractor:
        return list(extractor.pages)
