import json
import re
from typing import Optional


def clean_md(text: str) -> str:
    """
    Sanitize markdown artifacts from text.
    Removes:
    - Leading headers (#, ##)
    - Bold markers (**, __)
    - Leading bullets (-, *)
    """
    if not text:
        return ""

    # Remove bolding (**text** -> text)
    text = re.sub(r"(\*\*|__)(.*?)\1", r"\2", text)

    # Remove leading headers (# Title -> Title)
    text = re.sub(r"^\s*#+\s+", "", text)

    # Remove leading bullets (- Item -> Item)
    text = re.sub(r"^\s*(?:[-*]\s+|・\s*)", "", text)

    return text.strip()


# "手順1:", "ステップ2：", "Step 3.", "4)", "5."
# A bare number is a prefix only when no digit follows its separator
# ("2、3分煮る" and "1.5カップ" are quantities).
_STEP_PREFIX = re.compile(
    r"^\s*(?:(?:手順|ステップ|step)\s*\d+\s*[:：.．、)]?|\d+\s*[:：.．、)](?!\d))\s*",
    re.IGNORECASE,
)


def clean_step(text: str) -> str:
    """Strip markdown and any leading step numbering from an instruction."""
    text = clean_md(str(text or ""))
    return _STEP_PREFIX.sub("", text).strip()


def _balanced_span(text: str, start: int) -> Optional[str]:
    """Return the brace-balanced span opening at `start`, honoring JSON strings."""
    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:idx + 1]
    return None


def extract_json_object(text: str) -> Optional[dict]:
    """
    Best-effort extraction of the first JSON object embedded in free text.

    LLM replies often wrap the payload in prose or code fences. Each `{` is
    tried in order; the first balanced span that parses to a dict wins.
    Returns None when nothing parses.
    """
    if not text:
        return None

    pos = text.find("{")
    while pos != -1:
        span = _balanced_span(text, pos)
        value = None
        if span is not None:
            try:
                value = json.loads(span)
            except json.JSONDecodeError:
                value = None
        if isinstance(value, dict):
            return value
        pos = text.find("{", pos + 1)
    return None


def dedupe(items) -> list[str]:
    """Order-preserving de-duplication of non-empty stripped strings."""
    seen = set()
    result = []
    for item in items or []:
        value = str(item).strip()
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def contains_any(text: str, keywords) -> bool:
    lowered = (text or "").lower()
    return any(k.lower() in lowered for k in keywords)


def first_match(text: str, rules, default=None):
    """Evaluate (keywords, result) rules in order; return the first hit."""
    for keywords, result in rules:
        if contains_any(text, keywords):
            return result
    return default
