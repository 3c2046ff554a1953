"""
JSON repair engine for the embedded Apollo payload.

The events array is cut out of a script tag with a regex, so it regularly
arrives with trailing garbage, raw control characters, or JavaScript-only
tokens. repair_json applies a fixed series of textual fixes and then, if the
result still does not parse, looks for the longest valid prefix.
"""
import json
import re
from typing import Optional

from launchscope.utils.logger import StageLogger

logger = StageLogger("json_repair")

_CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F-\x9F]")
_NON_ASCII = re.compile(r"[^\x00-\x7F]")
_LONE_BACKSLASH = re.compile(r'\\(?!["\\/bfnrtu])')
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_BROKEN_STRING_BREAK = re.compile(r"([^\\])([\"'])\s*[\n\r]+\s*([\"'])")


def is_valid_json(text: str) -> bool:
    """Strict parse check."""
    try:
        json.loads(text)
    except (json.JSONDecodeError, RecursionError):
        return False
    return True


def sanitize(text: str) -> str:
    """
    Apply the textual fixes, in order, to the whole string.

    1. `undefined` -> `null`
    2. strip control characters
    3. escape backslashes that do not start a JSON escape
    4. drop trailing commas before `}` / `]`
    5. join quoted strings split by raw line breaks
    """
    text = text.replace("undefined", "null")
    text = _CONTROL_CHARS.sub("", text)
    text = _LONE_BACKSLASH.sub(r"\\\\", text)
    text = _TRAILING_COMMA.sub(r"\1", text)
    text = _BROKEN_STRING_BREAK.sub(r"\1\2 \3", text)
    return text


def find_last_balanced_array(text: str) -> Optional[str]:
    """
    Return the prefix ending at the last point where `[`/`]` depth returns to zero,
    if that prefix parses. Braces and quotes are not tracked.
    """
    depth = 0
    last_close = -1

    for i, char in enumerate(text):
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                last_close = i

    if last_close > 0:
        candidate = text[:last_close + 1]
        if is_valid_json(candidate):
            return candidate

    return None


def aggressive_sanitize(text: str) -> str:
    """
    Last-resort cleanup. The result is returned unvalidated; the caller's own
    parse decides whether repair succeeded.
    """
    result = _NON_ASCII.sub("", text)
    result = _CONTROL_CHARS.sub("", result)

    if result.count('"') % 2 != 0:
        last_quote = result.rfind('"')
        if last_quote > 0:
            result = result[:last_quote + 1]

    if not result.endswith("]"):
        last_bracket = result.rfind("]")
        if last_bracket > 0:
            result = result[:last_bracket + 1]

    return result


def repair_json(raw: Optional[str]) -> Optional[str]:
    """
    Best-effort recovery of a parseable JSON document from `raw`.

    Returns `raw` unchanged when it is None or empty. Otherwise returns the
    sanitized string if it parses, a truncated prefix if one parses, and
    finally the aggressively sanitized string (which may still be invalid).
    """
    if not raw:
        return raw

    sanitized = sanitize(raw)

    try:
        json.loads(sanitized)
        return sanitized
    except json.JSONDecodeError as e:
        error_position = e.pos
        error_message = e.msg
    except RecursionError:
        error_position = None
        error_message = "maximum nesting depth exceeded"

    if error_position is not None:
        truncated = sanitized[:error_position]
        if is_valid_json(truncated):
            logger.log_fallback(
                from_source="strict_parse",
                to_source="truncate_at_error",
                reason=error_message,
                position=error_position,
                dropped_chars=len(sanitized) - error_position,
            )
            return truncated

        balanced = find_last_balanced_array(sanitized)
        if balanced is not None:
            logger.log_fallback(
                from_source="truncate_at_error",
                to_source="last_balanced_array",
                reason=error_message,
                dropped_chars=len(sanitized) - len(balanced),
            )
            return balanced

    logger.log_fallback(
        from_source="structural_repair",
        to_source="aggressive_sanitize",
        reason=error_message,
    )
    return aggressive_sanitize(sanitized)
