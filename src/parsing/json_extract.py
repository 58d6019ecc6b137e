"""Locate the first JSON object embedded in free-form model output."""

import json


class JsonExtractionError(ValueError):
    """Raised when text contains no balanced, parseable JSON object."""


def extract_json_object(text: str | None) -> dict:
    """Return the first balanced ``{...}`` span that parses as a JSON object.

    Braces inside JSON string literals are ignored when balancing. A balanced
    span that fails to parse is skipped and the scan resumes at the next
    ``{`` after its opening brace, so prose like "use {curly} braces" before
    the payload does not hide it.

    Args:
        text: Raw response text, possibly wrapped in prose or code fences.

    Returns:
        The parsed object.

    Raises:
        JsonExtractionError: If no balanced span parses as an object.
    """
    if not text:
        raise JsonExtractionError("Empty response text")

    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            try:
                parsed = json.loads(text[start:end + 1])
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, dict):
                return parsed
        start = text.find("{", start + 1)

    raise JsonExtractionError("No balanced JSON object found in response")


def _balanced_end(text: str, start: int) -> int | None:
    """Index of the brace closing the one at ``start``, or None."""
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
                return i

    return None
