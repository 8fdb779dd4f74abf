"""
Extraction of JSON payloads from free-text model responses.

Local models are chatty and often wrap the requested JSON in prose or code
fences. Everything that deals with that lives here, so the orchestrator only
ever receives typed values or a ResponseParseError.
"""

import json
import re
from typing import Any, Dict, List

from ..types import AICommandSuggestion, CommandCategory, NLCommandResponse
from ...utils.logging import get_logger

logger = get_logger(__name__)

# Greedy inside the bracket bound: from the first "[{" to the last "}]" that
# is not interrupted by a closing square bracket.
_ARRAY_PATTERN = re.compile(r"\[\s*\{[^\]]*\}\s*\]", re.DOTALL)


class ResponseParseError(ValueError):
    """The model response did not contain the expected JSON shape."""
    pass


def _raw_decode_first(text: str, opener: str, expected: type) -> Any:
    """Scan for the first position where a JSON value of `expected` type decodes."""
    decoder = json.JSONDecoder()
    index = text.find(opener)
    while index != -1:
        try:
            value, _ = decoder.raw_decode(text, index)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, expected):
            return value
        index = text.find(opener, index + 1)
    return None


def extract_json_array(text: str) -> List[Any]:
    """Return the first JSON array of objects embedded in `text`.

    Raises:
        ResponseParseError: If no array of objects can be decoded
    """
    match = _ARRAY_PATTERN.search(text)
    if match:
        try:
            value = json.loads(match.group(0))
            if isinstance(value, list):
                return value
        except json.JSONDecodeError as e:
            logger.debug(f"Regex-extracted array is not valid JSON: {e}")

    value = _raw_decode_first(text, "[", list)
    if value is None:
        raise ResponseParseError("No JSON array found in model response")
    return value


def extract_json_object(text: str) -> Dict[str, Any]:
    """Return the first JSON object embedded in `text`.

    Raises:
        ResponseParseError: If no object can be decoded
    """
    value = _raw_decode_first(text, "{", dict)
    if value is None:
        raise ResponseParseError("No JSON object found in model response")
    return value


def _clamp_confidence(raw: Any, default: float) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    return min(max(value, 0.0), 1.0)


def parse_suggestions(text: str, category: str = None) -> List[AICommandSuggestion]:
    """Parse `[{command, description, confidence}, ...]` out of a response.

    Entries without a usable command are dropped; confidence is clamped to
    [0, 1]. Results are ordered by confidence, highest first.

    Raises:
        ResponseParseError: If nothing usable was found
    """
    items = extract_json_array(text)

    suggestions = []
    for item in items:
        if not isinstance(item, dict):
            continue
        command = item.get("command")
        if not isinstance(command, str) or not command.strip():
            continue
        suggestions.append(AICommandSuggestion(
            command=command.strip(),
            description=str(item.get("description") or ""),
            confidence=_clamp_confidence(item.get("confidence"), 0.5),
            is_from_ai=True,
            category=category,
        ))

    if not suggestions:
        raise ResponseParseError("Model response contained no usable suggestions")

    suggestions.sort(key=lambda s: s.confidence, reverse=True)
    return suggestions


def _string_list(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [str(item) for item in raw if isinstance(item, (str, int, float)) and str(item).strip()]


def parse_translation(text: str) -> NLCommandResponse:
    """Parse `{command, explanation, confidence, alternatives, warnings, category}`.

    Raises:
        ResponseParseError: If the object is missing or has no command
    """
    data = extract_json_object(text)

    command = data.get("command")
    if not isinstance(command, str) or not command.strip():
        raise ResponseParseError("Translation response has no command")

    return NLCommandResponse(
        command=command.strip(),
        explanation=str(data.get("explanation") or ""),
        confidence=_clamp_confidence(data.get("confidence"), 0.5),
        alternatives=_string_list(data.get("alternatives")),
        warnings=_string_list(data.get("warnings")),
        category=CommandCategory.from_label(data.get("category")),
    )
