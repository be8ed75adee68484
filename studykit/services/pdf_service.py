"""PDF text extraction and OCR.

Text-layer PDFs go through PyPDF2. Image-only PDFs and image uploads are
rendered, cleaned up for recognition and passed to tesseract one page at a time.
"""
from __future__ import annotations

import io
import logging
import os
import shutil
import time
from typing import List, Tuple

import fitz  # PyMuPDF
import PyPDF2
import pytesseract
from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

# Ensure pytesseract can find the tesseract binary on common hosts.
if shutil.which("tesseract") is None:
    for cand in ("/usr/bin/tesseract", "/usr/local/bin/tesseract"):
        if os.path.exists(cand):
            pytesseract.pytesseract.tesseract_cmd = cand
            break


def is_scanned_pdf(pdf_bytes: bytes) -> bool:
    """True when no page of the PDF carries any text items."""
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        counts = [len(page.get_text("words")) for page in doc]
    return all(n == 0 for n in counts)


def extract_pdf_text(pdf_bytes: bytes) -> str:
    try:
        reader = PyPDF2.PdfReader(io.BytesIO(pdf_bytes))
        parts: List[str] = []
        for page in reader.pages:
            parts.append(page.extract_text() or "")
        return "\n".join(parts).strip()
    except Exception:
        logger.exception("Error extracting text from PDF")
        return ""


def prepare_for_ocr(img: Image.Image, max_width: int = 1024) -> bytes:
    """Resize, grayscale and contrast-normalize an image, returning PNG bytes."""
    g = img.convert("L")
    if g.width > max_width:
        height = max(1, round(g.height * max_width / g.width))
        g = g.resize((max_width, height), Image.Resampling.LANCZOS)
    g = ImageOps.autocontrast(g)
    buf = io.BytesIO()
    g.save(buf, format="PNG")
    return buf.getvalue()


def _ocr_png(png_bytes: bytes, tmp_dir: str, lang: str) -> str:
    path = os.path.join(tmp_dir, f"ocr_{int(time.time() * 1000)}_{os.urandom(4).hex()}.png")
    with open(path, "wb") as f:
        f.write(png_bytes)
    try:
        return (pytesseract.image_to_string(path, lang=lang) or "").strip()
    finally:
        os.remove(path)


def ocr_image_bytes(data: bytes, tmp_dir: str, max_width: int = 1024, lang: str = "eng") -> str:
    try:
        with Image.open(io.BytesIO(data)) as img:
            png = prepare_for_ocr(img, max_width)
        return _ocr_png(png, tmp_dir, lang)
    except Exception:
        logger.exception("Error in image OCR")
        return ""


def ocr_pdf_bytes(pdf_bytes: bytes, tmp_dir: str, max_width: int = 1024, max_pages: int = 12,
                  lang: str = "eng") -> str:
    try:
        with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
            parts: List[str] = []
            for i in range(min(len(doc), max_pages)):
                pix = doc.load_page(i).get_pixmap(dpi=200, alpha=False)
                with Image.open(io.BytesIO(pix.tobytes("png"))) as img:
                    png = prepare_for_ocr(img, max_width)
                parts.append(_ocr_png(png, tmp_dir, lang))
        return "\n".join(parts).strip()
    except Exception:
        logger.exception("Error in PDF OCR")
        return ""


def ocr_ready() -> Tuple[bool, str]:
    try:
        _ = pytesseract.get_tesseract_version()
    except Exception as e:
        return False, f"tesseract not available: {e}"
    return True, ""
