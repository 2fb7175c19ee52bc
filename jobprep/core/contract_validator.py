"""
Output Contract Validator for JobPrep

Turns a raw model reply into a typed, contract-checked value:

1. Tolerant extraction - strip code fence lines and surrounding prose, then
   locate the first balanced JSON object (or, failing that, array).
2. Parse - a body that will not parse is a MalformedOutput.
3. Strict validation - walk the contract's declared shape; any mismatch is
   a SchemaViolation naming the field path and expected vs. actual shape.

Nothing downstream of this module may assume the upstream behaved.
"""

import json
import logging
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from jobprep.core.contracts import Contract
from jobprep.core.exceptions import ContractIssue, MalformedOutput, SchemaViolation

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

EXCERPT_CHARS = 500

_FENCE_LINE_RE = re.compile(r"^[ \t]*```[\w+-]*[ \t]*$", re.MULTILINE)
_LEADING_FENCE_RE = re.compile(r"^```[\w+-]*")
_TRAILING_FENCE_RE = re.compile(r"```$")
_CLOSERS = {"{": "}", "[": "]"}


def excerpt(text: str, limit: int = EXCERPT_CHARS) -> str:
    """Truncate reply text for diagnostics."""
    if len(text) <= limit:
        return text
    return text[:limit] + f"... [{len(text) - limit} more chars]"


# ============================================================================
# EXTRACTION
# ============================================================================

def _balanced_end(text: str, start: int) -> int | None:
    """Index just past the bracket that closes ``text[start]``, or None."""
    stack = [_CLOSERS[text[start]]]
    in_string = False
    escaped = False

    for index in range(start + 1, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in "}]":
            if char != stack[-1]:
                return None
            stack.pop()
            if not stack:
                return index + 1

    return None


def _strip_fences(text: str) -> str:
    """Drop fence markers on their own lines or at the very edges of a reply."""
    text = _FENCE_LINE_RE.sub("", text).strip()
    text = _LEADING_FENCE_RE.sub("", text)
    text = _TRAILING_FENCE_RE.sub("", text)
    return text.strip()


def extract_json(raw_reply: str) -> Any:
    """
    Locate and parse the JSON body of a reply.

    Balanced spans are tried left to right without descending into a span
    once it has been parsed or rejected. Every contract root is an object,
    so the first parseable object wins; a parseable array is returned only
    when no object parses, which lets a citation like ``[1]`` in leading
    prose sit in front of the real body.

    Raises:
        MalformedOutput: If no balanced, parseable span exists
    """
    text = _strip_fences(raw_reply or "")
    if not text:
        raise MalformedOutput("Reply was empty", raw_excerpt="")

    first_error: str | None = None
    fallback: list | None = None
    start = 0
    while start < len(text):
        char = text[start]
        if char not in _CLOSERS:
            start += 1
            continue
        end = _balanced_end(text, start)
        if end is None:
            first_error = first_error or f"Unbalanced {char} at offset {start}"
            start += 1
            continue
        try:
            value = json.loads(text[start:end])
        except json.JSONDecodeError as e:
            first_error = first_error or f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})"
        else:
            if isinstance(value, dict):
                return value
            if fallback is None:
                fallback = value
        start = end

    if fallback is not None:
        return fallback

    raise MalformedOutput(
        first_error or "No JSON object or array found in reply",
        raw_excerpt=excerpt(raw_reply),
    )


# ============================================================================
# VALIDATION
# ============================================================================

def _format_path(loc: tuple[Any, ...]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def _describe(value: Any) -> str:
    """Short JSON-flavoured description of a value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return f"boolean {str(value).lower()}"
    if isinstance(value, (int, float)):
        return f"number {value}"
    if isinstance(value, str):
        shown = value if len(value) <= 40 else value[:40] + "..."
        return f'string "{shown}"'
    if isinstance(value, list):
        return f"array of {len(value)}"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _issues_from(error: ValidationError) -> list[ContractIssue]:
    issues = []
    for detail in error.errors(include_url=False):
        actual = "missing" if detail["type"] == "missing" else _describe(detail.get("input"))
        issues.append(ContractIssue(
            path=_format_path(detail["loc"]),
            expected=detail["msg"],
            actual=actual,
        ))
    return issues


def validate(raw_reply: str, contract: Contract[T]) -> T:
    """
    Validate a raw reply against a contract.

    Args:
        raw_reply: Text returned by the generation service
        contract: Declared output shape

    Returns:
        The parsed value typed as the contract's model

    Raises:
        MalformedOutput: If no JSON body can be parsed
        SchemaViolation: If the body does not match the contract
    """
    data = extract_json(raw_reply)

    try:
        value = contract.model.model_validate(data)
    except ValidationError as e:
        issues = _issues_from(e)
        logger.warning(f"{contract.name} reply violates contract: {'; '.join(map(str, issues))}")
        raise SchemaViolation(contract.name, issues, raw_excerpt=excerpt(raw_reply)) from e

    issues = [issue for check in contract.checks for issue in check(value)]
    if issues:
        logger.warning(f"{contract.name} reply violates contract: {'; '.join(map(str, issues))}")
        raise SchemaViolation(contract.name, issues, raw_excerpt=excerpt(raw_reply))

    return value
