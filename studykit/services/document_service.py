"""Upload text extraction.

Every extractor follows the same contract: failures are logged and come back
as an empty string, so callers only need to check for empty text.
"""
from __future__ import annotations

import io
import logging
import os
import re
import shutil
import subprocess
import tempfile
import time
from typing import Any, List, Mapping, Optional

import docx
from pptx import Presentation
from werkzeug.utils import secure_filename

from studykit.services.pdf_service import extract_pdf_text, is_scanned_pdf, ocr_image_bytes, ocr_pdf_bytes

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp", ".tif", ".tiff", ".bmp")
PLAIN_TEXT_EXTENSIONS = (".txt", ".md", ".csv", ".json", ".html", ".htm")
SPREADSHEET_EXTENSIONS = (".xlsx", ".xls", ".ods")


def temp_doc_path(docs_dir: str, filename: str) -> str:
    stem, ext = os.path.splitext(filename or "")
    # secure_filename drops non-ASCII names entirely; the suffix drives extractor dispatch
    safe = secure_filename(stem) or "upload"
    ext = re.sub(r"[^a-z0-9]", "", ext.lower())
    name = f"{safe}.{ext}" if ext else safe
    return os.path.join(docs_dir, f"{int(time.time() * 1000)}_{name}")


def extract_docx_text(data: bytes) -> str:
    try:
        doc = docx.Document(io.BytesIO(data))
        parts: List[str] = [p.text for p in doc.paragraphs if p.text]
        for table in doc.tables:
            for row in table.rows:
                for cell in row.cells:
                    if cell.text:
                        parts.append(cell.text)
        return "\n".join(parts).strip()
    except Exception:
        logger.exception("Error extracting text from DOCX")
        return ""


def extract_pptx_text(path: str) -> str:
    prs = Presentation(path)
    parts: List[str] = []
    for slide in prs.slides:
        for shape in slide.shapes:
            if getattr(shape, "has_text_frame", False) and shape.text_frame.text:
                parts.append(shape.text_frame.text)
        if slide.has_notes_slide:
            notes = slide.notes_slide.notes_text_frame
            if notes is not None and notes.text:
                parts.append(notes.text)
    return "\n".join(parts).strip()


def get_soffice_binary() -> Optional[str]:
    configured = (os.getenv("SOFFICE_BINARY") or "").strip()
    if configured:
        return configured
    return shutil.which("soffice") or shutil.which("libreoffice")


def convert_with_soffice(path: str, timeout: int = 120) -> str:
    binary = get_soffice_binary()
    if not binary:
        raise RuntimeError("LibreOffice (soffice) not available")
    ext = os.path.splitext(path)[1].lower()
    target, out_ext = ("csv", ".csv") if ext in SPREADSHEET_EXTENSIONS else ("txt:Text", ".txt")
    with tempfile.TemporaryDirectory(dir=os.path.dirname(path) or None) as out_dir:
        subprocess.run(
            [binary, "--headless", "--convert-to", target, "--outdir", out_dir, path],
            check=True,
            capture_output=True,
            timeout=timeout,
        )
        stem = os.path.splitext(os.path.basename(path))[0]
        with open(os.path.join(out_dir, stem + out_ext), "r", encoding="utf-8", errors="ignore") as f:
            return f.read().strip()


def extract_other_text(path: str) -> str:
    """Extract text from any other format, reading the saved upload from disk."""
    ext = os.path.splitext(path)[1].lower()
    try:
        if ext in PLAIN_TEXT_EXTENSIONS:
            with open(path, "r", encoding="utf-8", errors="ignore") as f:
                return f.read().strip()
        if ext == ".pptx":
            return extract_pptx_text(path)
        return convert_with_soffice(path)
    except Exception:
        logger.exception("Error extracting text from %s", os.path.basename(path))
        return ""


def extract_upload(filename: str, data: bytes, cfg: Mapping[str, Any]) -> str:
    """Save the upload to the temp docs folder, extract its text, then delete the copy."""
    name = (filename or "").lower()
    path = temp_doc_path(cfg["TEMP_DOCS_DIR"], name)
    with open(path, "wb") as f:
        f.write(data)

    images_dir = cfg["TEMP_IMAGES_DIR"]
    max_width = cfg.get("OCR_MAX_WIDTH", 1024)
    lang = cfg.get("OCR_LANG", "eng")
    try:
        if name.endswith(".pdf"):
            if is_scanned_pdf(data):
                logger.info("No text layer in %s, running OCR", name)
                return ocr_pdf_bytes(data, images_dir, max_width=max_width,
                                     max_pages=cfg.get("OCR_MAX_PAGES", 12), lang=lang)
            return extract_pdf_text(data)
        if name.endswith(".docx"):
            return extract_docx_text(data)
        if name.endswith(IMAGE_EXTENSIONS):
            return ocr_image_bytes(data, images_dir, max_width=max_width, lang=lang)
        return extract_other_text(path)
    finally:
        os.remove(path)
