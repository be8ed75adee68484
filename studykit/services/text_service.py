"""Text cleanup applied to every extracted document before use."""
from __future__ import annotations

import re
from typing import Optional

# U+2022 is the regular bullet, U+F0B7 is the private-use glyph Word exports for Symbol-font bullets.
BULLET_RE = re.compile(r"[\u2022\uf0b7]")


def clean_text(text: Optional[str]) -> str:
    if not text:
        return ""
    s = re.sub(r"\n+", "\n", text)
    s = re.sub(r"([a-z])([A-Z])", r"\1 \2", s)
    s = re.sub(r"([a-zA-Z])(\d)", r"\1 \2", s)
    s = re.sub(r"(\d)([a-zA-Z])", r"\1 \2", s)
    s = BULLET_RE.sub("- ", s)
    s = re.sub(r"([.,;:])(?=\S)", r"\1 ", s)
    s = re.sub(r"\s{2,}", " ", s)
    return s.strip()


def clamp_text(s: str, limit: int) -> str:
    return (s or "")[:limit]
