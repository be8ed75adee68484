"""
PDF Extraction and OCR Tests
"""
import io
import os

import pytest
from PIL import Image

from studykit.services import pdf_service


def _png(width, height, color=(200, 200, 200)):
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


class TestScannedDetection:
    """Test the image-only PDF heuristic"""

    def test_blank_pages_are_scanned(self, make_pdf):
        assert pdf_service.is_scanned_pdf(make_pdf("", "")) is True

    def test_text_page_is_not_scanned(self, make_pdf):
        assert pdf_service.is_scanned_pdf(make_pdf("Mitochondria produce energy")) is False

    def test_one_text_page_flips_result(self, make_pdf):
        assert pdf_service.is_scanned_pdf(make_pdf("", "", "Only the last page has text")) is False

    def test_parse_errors_propagate(self):
        with pytest.raises(Exception):
            pdf_service.is_scanned_pdf(b"definitely not a pdf")


class TestTextLayer:
    """Test direct PDF text extraction"""

    def test_extracts_text(self, make_pdf):
        text = pdf_service.extract_pdf_text(make_pdf("Mitochondria produce energy", "Second page"))
        assert "Mitochondria produce energy" in text
        assert "Second page" in text
        assert text == text.strip()

    def test_parse_failure_returns_empty(self):
        assert pdf_service.extract_pdf_text(b"%PDF-broken") == ""


class TestOCR:
    """Test OCR preprocessing and temp image lifecycle"""

    def test_prepare_resizes_wide_images(self):
        with Image.open(io.BytesIO(_png(2048, 512))) as img:
            out = pdf_service.prepare_for_ocr(img, max_width=1024)
        with Image.open(io.BytesIO(out)) as result:
            assert result.format == "PNG"
            assert result.mode == "L"
            assert result.size == (1024, 256)

    def test_prepare_keeps_narrow_images(self):
        with Image.open(io.BytesIO(_png(300, 100))) as img:
            out = pdf_service.prepare_for_ocr(img, max_width=1024)
        with Image.open(io.BytesIO(out)) as result:
            assert result.size == (300, 100)

    def test_image_ocr_deletes_temp_file(self, tmp_path, monkeypatch):
        seen = []

        def fake_ocr(path, lang=None):
            assert os.path.exists(path)
            assert lang == "eng"
            seen.append(path)
            return "  Recognized words \n"

        monkeypatch.setattr(pdf_service.pytesseract, "image_to_string", fake_ocr)
        text = pdf_service.ocr_image_bytes(_png(1500, 400), str(tmp_path))

        assert text == "Recognized words"
        assert len(seen) == 1
        assert seen[0].endswith(".png")
        assert os.listdir(tmp_path) == []

    def test_image_ocr_failure_returns_empty_and_cleans_up(self, tmp_path, monkeypatch):
        def broken_ocr(path, lang=None):
            raise RuntimeError("tesseract crashed")

        monkeypatch.setattr(pdf_service.pytesseract, "image_to_string", broken_ocr)
        assert pdf_service.ocr_image_bytes(_png(100, 100), str(tmp_path)) == ""
        assert os.listdir(tmp_path) == []

    def test_pdf_ocr_runs_per_page(self, tmp_path, monkeypatch, make_pdf):
        calls = []

        def fake_ocr(path, lang=None):
            calls.append(path)
            return f"page {len(calls)}"

        monkeypatch.setattr(pdf_service.pytesseract, "image_to_string", fake_ocr)
        text = pdf_service.ocr_pdf_bytes(make_pdf("", "", ""), str(tmp_path), max_pages=2)

        assert text == "page 1\npage 2"
        assert len(calls) == 2
        assert os.listdir(tmp_path) == []

    def test_unreadable_image_returns_empty(self, tmp_path):
        assert pdf_service.ocr_image_bytes(b"not an image", str(tmp_path)) == ""
