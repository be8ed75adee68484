"""
API Blueprint - document upload and study assistant endpoints
"""
from typing import Any, Dict, Tuple

from flask import Blueprint, current_app, jsonify, request

from studykit import get_cache
from studykit.services import llm_service
from studykit.services.document_service import extract_upload
from studykit.services.llm_service import GenerationError, MalformedOutputError
from studykit.services.text_service import clean_text

api_bp = Blueprint('api', __name__)

ASK_FALLBACK = "I couldn't process your question. Try again!"


def _payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _field(payload: Dict[str, Any], name: str) -> str:
    value = payload.get(name)
    # Scalars are accepted as text; objects, lists and booleans count as missing
    if isinstance(value, bool) or not isinstance(value, (str, int, float)) or not value:
        return ""
    return str(value).strip()


def _error(message: str, status: int) -> Tuple[Any, int]:
    return jsonify({"error": message}), status


# ============ API Routes ============

@api_bp.route("/upload", methods=["POST"])
def upload():
    file = request.files.get("file")
    if not file or not file.filename:
        return _error("No file uploaded", 400)

    cache = get_cache()
    try:
        filename = file.filename
        data = file.read()
        extracted = extract_upload(filename, data, current_app.config)

        cleaned = clean_text(extracted)
        if not cleaned:
            return _error("No extractable text found", 400)

        cached = cache.get(cleaned)
        if cached is not None:
            current_app.logger.info("Serving cached artifact for %s", filename)
            return jsonify({"summary": cached})

        artifact = llm_service.generate_study_artifact(cleaned, current_app.config)
        cache.set(cleaned, artifact)
        return jsonify({"summary": artifact})
    except MalformedOutputError as e:
        current_app.logger.error("Malformed artifact output: %s", e)
        return _error("Generation returned malformed output.", 502)
    except GenerationError as e:
        current_app.logger.error("Error generating summary: %s", e)
        return _error("Failed to generate summary.", 500)
    except Exception as e:
        current_app.logger.exception("Error processing document")
        return _error(str(e) or "Failed to process document.", 500)


@api_bp.route("/ask", methods=["POST"])
def ask():
    payload = _payload()
    query = _field(payload, "query")
    context = _field(payload, "context")
    if not query or not context:
        return _error("Query and context are required.", 400)

    try:
        answer = llm_service.answer_question(query, context, current_app.config)
    except GenerationError as e:
        current_app.logger.error("Error answering question: %s", e)
        return _error("Failed to fetch response from AI.", 500)

    return jsonify({"response": answer or ASK_FALLBACK})


@api_bp.route("/flashcards", methods=["POST"])
def flashcards():
    context = _field(_payload(), "context")
    if not context:
        return _error("Context is required to generate flashcards.", 400)

    try:
        cards = llm_service.generate_flashcards(context, current_app.config)
    except GenerationError as e:
        current_app.logger.error("Error generating flashcards: %s", e)
        cards = ""
    if not cards:
        return _error("Failed to generate flashcards.", 500)
    return jsonify({"flashcards": cards})


@api_bp.route("/quiz", methods=["POST"])
def quiz():
    context = _field(_payload(), "context")
    if not context:
        return _error("Context is required to generate quiz questions.", 400)

    try:
        questions = llm_service.generate_quiz(context, current_app.config)
    except GenerationError as e:
        current_app.logger.error("Error generating quiz: %s", e)
        questions = ""
    if not questions:
        return _error("Failed to generate quiz.", 500)
    return jsonify({"quiz": questions})


@api_bp.route("/explain", methods=["POST"])
def explain():
    payload = _payload()
    question = _field(payload, "question")
    correct_answer = _field(payload, "correctAnswer")
    if not question or not correct_answer:
        return _error("Question and correct answer are required for explanation.", 400)

    try:
        explanation = llm_service.explain_answer(question, correct_answer, current_app.config)
    except GenerationError as e:
        current_app.logger.error("Error generating explanation: %s", e)
        explanation = ""
    if not explanation:
        return _error("Failed to generate explanation.", 500)
    return jsonify({"explanation": explanation})
