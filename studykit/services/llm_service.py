"""
Generation backend gateway.

One upstream call per request, no retries. Gemini is reached over its REST
API; the OpenAI SDK is the alternate backend. Upstream failures raise
GenerationError, unparseable artifact output raises MalformedOutputError.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

import requests
from openai import OpenAI

from studykit import prompts
from studykit.services.text_service import clamp_text

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

QUESTION_TYPES = {
    "multiple_choice": "multiple_choice",
    "mcq": "multiple_choice",
    "true_false": "true_false",
    "truefalse": "true_false",
    "fill_in_blank": "fill_in_blank",
    "fill_in_the_blank": "fill_in_blank",
}


class GenerationError(Exception):
    """The generation backend could not be reached or refused the request."""


class MalformedOutputError(GenerationError):
    """The backend answered, but not with the JSON we asked for."""


# ============ Backends ============

def backend_name(cfg: Mapping[str, Any]) -> str:
    return (str(cfg.get("GENERATION_BACKEND") or "gemini")).strip().lower()


def client_ready(cfg: Mapping[str, Any]) -> Tuple[bool, str]:
    backend = backend_name(cfg)
    if backend == "gemini":
        if not (cfg.get("GEMINI_API_KEY") or "").strip():
            return False, "GEMINI_API_KEY is missing"
        return True, ""
    if backend == "openai":
        if not (cfg.get("OPENAI_API_KEY") or "").strip():
            return False, "OPENAI_API_KEY is missing"
        return True, ""
    return False, f"Unknown generation backend: {backend}"


def candidate_text(data: Dict[str, Any]) -> str:
    """Text of the first Gemini candidate, or empty string."""
    try:
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
        return "".join(p.get("text") or "" for p in parts if isinstance(p, dict))
    except AttributeError:
        return ""


def gemini_generate(prompt: str, cfg: Mapping[str, Any], json_mode: bool = False) -> str:
    model = (cfg.get("GEMINI_MODEL") or "gemini-1.5-flash").strip()
    url = f"{GEMINI_API_BASE}/models/{model}:generateContent"
    body: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
    if json_mode:
        body["generationConfig"] = {"responseMimeType": "application/json"}
    try:
        res = requests.post(
            url,
            params={"key": cfg["GEMINI_API_KEY"].strip()},
            headers={"Content-Type": "application/json"},
            json=body,
            timeout=cfg.get("LLM_TIMEOUT", 120),
        )
        res.raise_for_status()
        data = res.json()
    except (requests.RequestException, ValueError) as e:
        raise GenerationError(f"Gemini request failed: {type(e).__name__}: {e}") from e
    return candidate_text(data if isinstance(data, dict) else {})


def openai_generate(prompt: str, cfg: Mapping[str, Any], json_mode: bool = False) -> str:
    client = OpenAI(api_key=cfg["OPENAI_API_KEY"].strip(), timeout=cfg.get("LLM_TIMEOUT", 120))
    kwargs: Dict[str, Any] = {}
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}
    try:
        res = client.chat.completions.create(
            model=(cfg.get("OPENAI_MODEL") or "gpt-4.1").strip(),
            messages=[{"role": "user", "content": prompt}],
            temperature=0.2,
            **kwargs,
        )
    except Exception as e:
        raise GenerationError(f"OpenAI request failed: {type(e).__name__}: {e}") from e
    return (res.choices[0].message.content or "") if res.choices else ""


BACKENDS = {
    "gemini": gemini_generate,
    "openai": openai_generate,
}


def generate_text(prompt: str, cfg: Mapping[str, Any], json_mode: bool = False) -> str:
    ok, msg = client_ready(cfg)
    if not ok:
        raise GenerationError(msg)
    backend = backend_name(cfg)
    logger.debug("Generation call via %s (%d prompt chars)", backend, len(prompt))
    return BACKENDS[backend](prompt, cfg, json_mode=json_mode).strip()


# ============ Output parsing ============

def safe_json_loads(s: str) -> Tuple[Optional[Dict[str, Any]], str]:
    if not s:
        return None, "Empty model output"

    # Strip markdown code blocks if present
    text = s.strip()
    if text.startswith("```"):
        lines = text.split("\n", 1)
        text = lines[1] if len(lines) > 1 else ""
        if text.endswith("```"):
            text = text[:-3].strip()
        elif "```" in text:
            text = text.rsplit("```", 1)[0].strip()

    try:
        obj = json.loads(text)
        if isinstance(obj, dict):
            return obj, ""
    except ValueError:
        pass

    # Fallback: extract first JSON object from text
    m = re.search(r"\{.*\}", text, flags=re.DOTALL)
    if m:
        try:
            obj = json.loads(m.group(0))
            if isinstance(obj, dict):
                return obj, ""
        except ValueError:
            pass
    return None, "Model did not return valid json"


ARTIFACT_SCHEMA: Dict[str, Any] = {
    "summary": {"key_points": []},
    "flashcards": [],
    "quiz": {"questions": []},
    "study_guide": {"sections": []},
}


def _str(v: Any) -> str:
    if v is None or isinstance(v, (dict, list)):
        return ""
    return str(v).strip()


def _str_list(v: Any) -> List[str]:
    if not isinstance(v, list):
        return []
    return [_str(x) for x in v if _str(x)]


def _dict_list(v: Any, fields: Tuple[str, ...]) -> List[Dict[str, str]]:
    if not isinstance(v, list):
        return []
    out = []
    for item in v:
        if isinstance(item, dict):
            out.append({f: _str(item.get(f)) for f in fields})
    return out


def validate_and_repair_artifact(obj: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate study artifact output and repair missing/malformed fields.

    Always returns a dict with summary, flashcards, quiz and study_guide in
    the documented shape; entries missing their identifying field are dropped.
    """
    if not obj or not isinstance(obj, dict):
        return json.loads(json.dumps(ARTIFACT_SCHEMA))

    # Summary: accept a bare string or list as the key points
    summary = obj.get("summary")
    if isinstance(summary, dict):
        key_points = _str_list(summary.get("key_points"))
    elif isinstance(summary, list):
        key_points = _str_list(summary)
    else:
        key_points = [_str(summary)] if _str(summary) else []

    flashcards = [fc for fc in _dict_list(obj.get("flashcards"), ("term", "definition")) if fc["term"]]

    quiz = obj.get("quiz")
    raw_questions = quiz.get("questions") if isinstance(quiz, dict) else quiz
    questions = []
    for q in raw_questions if isinstance(raw_questions, list) else []:
        if not isinstance(q, dict) or not _str(q.get("question")):
            continue
        qtype = re.sub(r"[\s\-/]+", "_", _str(q.get("type")).lower())
        questions.append({
            "question": _str(q.get("question")),
            "type": QUESTION_TYPES.get(qtype, "multiple_choice"),
            "options": _str_list(q.get("options") if "options" in q else q.get("choices")),
            "answer": _str(q.get("answer") if "answer" in q else q.get("correctAnswer")),
            "explanation": _str(q.get("explanation")),
        })

    guide = obj.get("study_guide")
    raw_sections = guide.get("sections") if isinstance(guide, dict) else guide
    sections = []
    for sec in raw_sections if isinstance(raw_sections, list) else []:
        if not isinstance(sec, dict) or not _str(sec.get("title")):
            continue
        sections.append({
            "title": _str(sec.get("title")),
            "summary": _str(sec.get("summary")),
            "comparisons": _dict_list(sec.get("comparisons"), ("concept_a", "concept_b", "difference")),
            "real_world_applications": _str_list(sec.get("real_world_applications")),
            "common_misconceptions": _dict_list(sec.get("common_misconceptions"), ("misunderstanding", "clarification")),
        })

    return {
        "summary": {"key_points": key_points},
        "flashcards": flashcards,
        "quiz": {"questions": questions},
        "study_guide": {"sections": sections},
    }


# ============ Generation paths ============

def generate_study_artifact(text: str, cfg: Mapping[str, Any]) -> Dict[str, Any]:
    prompt = prompts.study_artifact_prompt(clamp_text(text, cfg.get("MAX_DOCUMENT_CHARS", 30000)))
    raw = generate_text(prompt, cfg, json_mode=True)
    obj, err = safe_json_loads(raw)
    if err or obj is None:
        raise MalformedOutputError(err or "Model did not return valid json")
    return validate_and_repair_artifact(obj)


def answer_question(query: str, context: str, cfg: Mapping[str, Any]) -> str:
    return generate_text(prompts.ask_prompt(query, context), cfg)


def generate_flashcards(context: str, cfg: Mapping[str, Any]) -> str:
    return generate_text(prompts.flashcards_prompt(context), cfg)


def generate_quiz(context: str, cfg: Mapping[str, Any]) -> str:
    return generate_text(prompts.quiz_prompt(context), cfg)


def explain_answer(question: str, correct_answer: str, cfg: Mapping[str, Any]) -> str:
    return generate_text(prompts.explain_prompt(question, correct_answer), cfg)
