"""Parsing of model responses."""

from .parser import (
    ResponseParseError,
    extract_json_array,
    extract_json_object,
    parse_suggestions,
    parse_translation,
)

__all__ = [
    "ResponseParseError",
    "extract_json_array",
    "extract_json_object",
    "parse_suggestions",
    "parse_translation",
]
