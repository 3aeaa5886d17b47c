"""
JSON extraction from raw LLM completions.

Ordered chain of text -> text | None steps:
1. _from_result_tags: content inside <result>...</result>, else raw text
2. _strip_code_fences: drop ```json ... ``` markers
3. _isolate_object: first balanced {...} block

Step 1 never fails (falls back to raw). Steps 2-3 return None when the
text has nothing left to parse.
"""

import json
import re
from typing import Any, Callable

from txn_agent.errors import ParseError

RESULT_CLOSE = "</result>"

_RESULT_TAG_RE = re.compile(r"<result>(.*?)</result>", re.DOTALL | re.IGNORECASE)
_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL | re.IGNORECASE)


def _from_result_tags(text: str) -> str | None:
    """Prefer content between result tags."""
    match = _RESULT_TAG_RE.search(text)
    if match:
        return match.group(1).strip()

    # Prompt ends with an open tag, so the completion may only close it
    close_idx = text.lower().find(RESULT_CLOSE)
    if close_idx != -1:
        return text[:close_idx].strip()

    return text.strip()


def _strip_code_fences(text: str) -> str | None:
    """Remove markdown code fences if present."""
    match = _FENCE_RE.search(text)
    if match:
        text = match.group(1)
    else:
        # Unterminated fence: ```json at start or ``` at end only
        text = re.sub(r"^```(?:json)?\s*", "", text.strip(), flags=re.IGNORECASE)
        text = re.sub(r"\s*```$", "", text)
    text = text.strip()
    return text or None


def _isolate_object(text: str) -> str | None:
    """Return the first balanced brace-delimited block, string-aware."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
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
                return text[start:i + 1]

    return None


EXTRACTION_STEPS: tuple[Callable[[str], str | None], ...] = (
    _from_result_tags,
    _strip_code_fences,
    _isolate_object,
)


def extract_rule_text(raw: str) -> str:
    """
    Run the extraction chain over a completion.

    Raises:
        ParseError: no JSON object could be isolated
    """
    text = raw or ""
    for step in EXTRACTION_STEPS:
        result = step(text)
        if result is None:
            raise ParseError(
                "Failed to parse JSON from LLM response: no JSON object found",
                raw_response=raw,
            )
        text = result
    return text


def parse_rule_json(raw: str) -> Any:
    """
    Extract and decode the JSON object in a completion.

    Raises:
        ParseError: nothing to extract, or the text is not valid JSON
    """
    text = extract_rule_text(raw)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Failed to parse JSON from LLM response: {e.msg} "
            f"(line {e.lineno}, column {e.colno})",
            raw_response=raw,
        ) from e
