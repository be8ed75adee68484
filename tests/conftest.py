"""
Test Configuration and Fixtures
"""
import io

import docx
import fitz
import pytest

from studykit import create_app


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create application for testing"""
    app = create_app('testing', overrides={
        'TEMP_IMAGES_DIR': str(tmp_path / 'temp_images'),
        'TEMP_DOCS_DIR': str(tmp_path / 'temp_docs'),
    })
    yield app


@pytest.fixture(scope='function')
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def make_pdf():
    """Build a PDF in memory; an empty string leaves the page blank"""
    def _make(*pages):
        doc = fitz.open()
        for text in pages:
            page = doc.new_page()
            if text:
                page.insert_text((72, 72), text, fontsize=12)
        data = doc.tobytes()
        doc.close()
        return data
    return _make


@pytest.fixture
def make_docx():
    """Build a DOCX in memory from paragraphs"""
    def _make(*paragraphs):
        document = docx.Document()
        for p in paragraphs:
            document.add_paragraph(p)
        buf = io.BytesIO()
        document.save(buf)
        return buf.getvalue()
    return _make


@pytest.fixture
def artifact():
    return {
        "summary": {"key_points": ["Cells are the basic unit of life"]},
        "flashcards": [{"term": "Cell", "definition": "Basic unit of life"}],
        "quiz": {"questions": [{
            "question": "What is the basic unit of life?",
            "type": "multiple_choice",
            "options": ["Atom", "Cell", "Organ", "Tissue"],
            "answer": "Cell",
            "explanation": "All living things are made of cells.",
        }]},
        "study_guide": {"sections": [{
            "title": "Cells",
            "summary": "Cells make up organisms.",
            "comparisons": [],
            "real_world_applications": ["Medicine"],
            "common_misconceptions": [],
        }]},
    }
