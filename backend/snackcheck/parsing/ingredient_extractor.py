"""
Split raw OCR label text into an ordered list of ingredient names.
- Strip a leading 'Ingredients:' / 'Contains:' / 'Made with:' label.
- Split on commas, semicolons and the word 'and'; flatten parenthesized sub-lists.
- Keep label casing, order and duplicates.
"""
import re
import logging
from typing import List

from snackcheck.errors import ExtractionError

logger = logging.getLogger(__name__)

_LABEL_PREFIX = re.compile(r"^\s*(?:ingredients?|contains?|made\s+with)\s*:?\s*", re.IGNORECASE)
_DELIMITER = re.compile(r"[,;]|\band\b", re.IGNORECASE)
# A period ends the list only when a new sentence starts ('Yellow No. 5' stays whole).
_SENTENCE_END = re.compile(r"\.\s+(?=[A-Z][a-z]|(?i:contains?\b))")
# Minor-ingredient clause that continues the list after a period.
_MINOR_INGREDIENTS = re.compile(
    r"^(?:and\s+)?(?:contains?\s+)?(?:less\s+than\s+)?\d+(?:\.\d+)?\s*%\s*(?:or\s+less\s+)?of\s*"
    r"(?:each\s+of\s+)?(?:the\s+following\s*)?:?\s*",
    re.IGNORECASE,
)
_BRACKET_NOISE = re.compile(r"[\[\]{}]")
_EDGE_PUNCTUATION = re.compile(r"^[^\w(]+|[^\w)%]+$")


def _clean_token(token: str) -> str:
    t = _BRACKET_NOISE.sub("", token)
    t = re.sub(r"\s+", " ", t).strip()
    t = _EDGE_PUNCTUATION.sub("", t).strip()
    if not re.search(r"[^\W_]", t):
        return ""
    return t


def _split_top_level(text: str) -> List[str]:
    """Split on delimiters that sit outside any parentheses."""
    parts: List[str] = []
    depth = 0
    start = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "(":
            depth += 1
        elif ch == ")" and depth > 0:
            depth -= 1
        elif depth == 0:
            m = _DELIMITER.match(text, i)
            if m:
                parts.append(text[start:i])
                i = start = m.end()
                continue
        i += 1
    parts.append(text[start:])
    return parts


def _split_by_parentheses(text: str) -> List[str]:
    """
    'Enriched Flour (Wheat Flour, Niacin, Iron)' ->
    ['Enriched Flour', 'Wheat Flour', 'Niacin', 'Iron']
    Nested parentheses are flattened recursively; an unclosed '(' keeps the rest as one chunk.
    """
    out: List[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch == "(":
            if depth == 0:
                chunk = text[start:i].strip()
                if chunk:
                    out.append(chunk)
                start = i + 1
            depth += 1
        elif ch == ")" and depth > 0:
            depth -= 1
            if depth == 0:
                for part in _split_top_level(text[start:i]):
                    if part.strip():
                        out.extend(_split_by_parentheses(part))
                start = i + 1
    tail = text[start:].strip()
    if tail:
        out.append(tail)
    return out


def strip_label_prefix(raw_text: str) -> str:
    text = re.sub(r"\s+", " ", raw_text or "").strip()
    return _LABEL_PREFIX.sub("", text, count=1)


def _list_body(text: str) -> str:
    """
    OCR often ends the list with a period followed by other label copy; keep the
    first sentence plus any 'Contains 2% or less of ...' sentences after it.
    """
    sentences = _SENTENCE_END.split(text)
    kept = [sentences[0]]
    for sentence in sentences[1:]:
        match = _MINOR_INGREDIENTS.match(sentence)
        if not match:
            break
        kept.append(sentence[match.end():])
    return ", ".join(kept)


def extract_ingredients(raw_text: str) -> List[str]:
    """
    Return candidate ingredient names in label order.
    Raises ExtractionError when the text is empty or yields no token; callers treat
    that as 'no ingredients found' and may substitute a fallback list.
    """
    if not raw_text or not raw_text.strip():
        raise ExtractionError("empty label text")

    body = strip_label_prefix(raw_text)
    body = _list_body(body)

    names: List[str] = []
    for segment in _split_top_level(body):
        if not segment.strip():
            continue
        for part in _split_by_parentheses(segment):
            cleaned = _clean_token(part)
            if cleaned:
                names.append(cleaned)

    if not names:
        raise ExtractionError(f"no ingredient tokens in {len(raw_text)} chars of label text")
    logger.debug("EXTRACT tokens=%d", len(names))
    return names
