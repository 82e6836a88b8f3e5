"""
Tolerant deserializer for model text that *should* contain one JSON array or object.

Steps, each applied only when the previous one did not produce a value:
  1. strip surrounding ``` fences
  2. keep only the outermost balanced [...] / {...} span (whichever opens first)
  3. json.loads
  4. repair: missing commas between `}{`, // and /* */ comments, trailing commas,
     raw control characters inside strings
  5. json.loads again, then give up: list shapes degrade to [], object shapes raise
"""
from __future__ import annotations

import json
import re
from typing import Any, Optional

from collab_hunter.common.errors import MalformedOutputError
from collab_hunter.common.logging_utils import get_logger

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"```[a-zA-Z0-9_-]*[ \t]*\r?\n?(.*?)```", re.DOTALL)
_OPENERS = {"[": "]", "{": "}"}


def strip_code_fences(text: str) -> str:
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    stripped = text.strip()
    # an unterminated fence (output cut off mid-stream)
    if stripped.startswith("```"):
        stripped = stripped.split("\n", 1)[1] if "\n" in stripped else ""
    return stripped.strip()


def extract_json_span(text: str) -> Optional[str]:
    """
    Return the outermost balanced [...] or {...} span, string-aware.
    If the payload was truncated the span runs to the end of the text.
    """
    start = -1
    for i, ch in enumerate(text):
        if ch in _OPENERS:
            start = i
            break
    if start < 0:
        return None

    stack = []
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
        elif ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in ("]", "}"):
            if stack and stack[-1] == ch:
                stack.pop()
                if not stack:
                    return text[start : i + 1]
    return text[start:]


def _strip_comments_and_controls(span: str) -> str:
    out = []
    i = 0
    n = len(span)
    in_string = False
    escaped = False
    while i < n:
        ch = span[i]
        if in_string:
            if escaped:
                escaped = False
                out.append(ch)
            elif ch == "\\":
                escaped = True
                out.append(ch)
            elif ch == '"':
                in_string = False
                out.append(ch)
            elif ord(ch) < 0x20:
                out.append(" ")
            else:
                out.append(ch)
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif span.startswith("//", i):
            end = span.find("\n", i)
            i = n if end < 0 else end
        elif span.startswith("/*", i):
            end = span.find("*/", i + 2)
            i = n if end < 0 else end + 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def _next_significant(text: str, i: int) -> str:
    while i < len(text) and text[i].isspace():
        i += 1
    return text[i] if i < len(text) else ""


def _fix_commas(span: str) -> str:
    out = []
    in_string = False
    escaped = False
    for i, ch in enumerate(span):
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
        elif ch == ",":
            if _next_significant(span, i + 1) in ("]", "}"):
                continue
            out.append(ch)
        elif ch == "}":
            out.append(ch)
            if _next_significant(span, i + 1) == "{":
                out.append(",")
        else:
            out.append(ch)
    return "".join(out)


def repair_json_text(span: str) -> str:
    return _fix_commas(_strip_comments_and_controls(span))


def tolerant_deserialize(raw_text: Optional[str], *, expect_list: bool) -> Any:
    """
    Best-effort parse of model text.

    For list-shaped results an unrecoverable payload means "nothing found" and
    returns []. For object-shaped results it raises MalformedOutputError since
    there is no meaningful empty object.
    """
    text = strip_code_fences(raw_text or "")
    span = extract_json_span(text)

    if span is None:
        if expect_list:
            logger.warning("No JSON structure found in model output; treating as empty list")
            return []
        raise MalformedOutputError("No JSON object found in model output", raw_text or "")

    try:
        return json.loads(span)
    except json.JSONDecodeError:
        pass

    repaired = repair_json_text(span)
    try:
        value = json.loads(repaired)
        logger.debug("Model output parsed after repair")
        return value
    except json.JSONDecodeError as e:
        if expect_list:
            logger.warning(f"Model output unrecoverable ({e}); treating as empty list")
            return []
        raise MalformedOutputError(f"Unrecoverable JSON in model output: {e}", raw_text or "") from e
