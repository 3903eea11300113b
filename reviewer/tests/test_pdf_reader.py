"""Tests for reviewer.core.pdf_reader module."""

import math
from unittest.mock import patch

import pytest

from reviewer.core.errors import ExtractionError
from reviewer.core.pdf_reader import PageExtractor, extract_pages, page_for_offset, split_pages


# =============================================================================
# split_pages
# =============================================================================


class TestSplitPages:

    def test_form_feed_is_page_boundary(self):
        assert split_pages("one\ftwo\fthree") == ["one", "two", "three"]

    def test_fallback_chunks_partition_text(self):
        text = "x" * 7001
        pages = split_pages(text, chunk_size=3000)

        assert len(pages) == math.ceil(len(text) / 3000) == 3
        assert "".join(pages) == text
        assert [len(p) for p in pages] == [3000, 3000, 1]

    def test_exact_multiple(self):
        assert len(split_pages("y" * 6000, chunk_size=3000)) == 2

    def test_empty_text_is_one_empty_page(self):
        assert split_pages("") == [""]


# =============================================================================
# page_for_offset
# =============================================================================


class TestPageForOffset:
    """Pages ["abc", "de"] joined with a form feed: "abc\\fde"."""

    pages = ["abc", "de"]

    def test_offsets_on_first_page(self):
        assert page_for_offset(0, self.pages, separator_len=1) == 1
        assert page_for_offset(2, self.pages, separator_len=1) == 1

    def test_separator_belongs_to_previous_page(self):
        assert page_for_offset(3, self.pages, separator_len=1) == 1

    def test_offsets_on_second_page(self):
        assert page_for_offset(4, self.pages, separator_len=1) == 2
        assert page_for_offset(5, self.pages, separator_len=1) == 2

    def test_past_end_maps_to_last_page(self):
        assert page_for_offset(100, self.pages, separator_len=1) == 2

    def test_without_separator(self):
        assert page_for_offset(3, self.pages) == 2


# =============================================================================
# PageExtractor
# =============================================================================


class TestPageExtractor:

    def test_physical_pages(self, make_pdf):
        data = make_pdf(["First page text", "Second page text"])

        with PageExtractor(data, file_name="two.pdf") as extractor:
            assert extractor.page_count == 2
            assert "First page text" in extractor.read_page(1)
            assert "Second page text" in extractor.read_page(2)
            assert extractor.read_page(3) == ""
            assert extractor.failed_pages == []

    def test_full_text_uses_form_feeds(self, make_pdf):
        with PageExtractor(make_pdf(["A", "B"])) as extractor:
            assert extractor.full_text().count("\f") == 1

    def test_extract_pages(self, make_pdf):
        pages = extract_pages(make_pdf(["Only page"]))
        assert len(pages) == 1
        assert "Only page" in pages[0]

    def test_empty_buffer_raises(self):
        with pytest.raises(ExtractionError, match="empty file"):
            PageExtractor(b"", file_name="empty.pdf")

    def test_non_pdf_rejected_before_parsing(self):
        with pytest.raises(ExtractionError, match="not a PDF"):
            PageExtractor(b"this is not a pdf at all", file_name="garbage.pdf")

    def test_unreadable_pdf_raises(self):
        with patch("reviewer.core.pdf_reader.fitz.open", side_effect=RuntimeError("broken xref")):
            with pytest.raises(ExtractionError, match="cannot open PDF"):
                PageExtractor(b"%PDF-1.7\n%broken", file_name="broken.pdf")

    def test_from_path(self, make_pdf, tmp_path):
        path = tmp_path / "doc.pdf"
        path.write_bytes(make_pdf(["On disk"]))

        extractor = PageExtractor.from_path(path)
        try:
            assert extractor.file_name == "doc.pdf"
            assert "On disk" in extractor.pages[0]
        finally:
            extractor.close()

    def test_from_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PageExtractor.from_path(tmp_path / "missing.pdf")
