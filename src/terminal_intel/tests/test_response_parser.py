"""
Test suite for extracting JSON answers from model responses.
"""

import pytest

from terminal_intel.core.response import (
    ResponseParseError,
    extract_json_object,
    parse_suggestions,
    parse_translation,
)
from terminal_intel.core.types import CommandCategory
from terminal_intel.tests.fixtures.fakes import SUGGESTION_JSON, TRANSLATION_JSON


@pytest.mark.unit
class TestParseSuggestions:
    """Test suggestion array parsing."""

    def test_array_wrapped_in_prose(self):
        suggestions = parse_suggestions(SUGGESTION_JSON)

        assert [s.command for s in suggestions] == ["git status", "git stash"]
        assert all(s.is_from_ai for s in suggestions)

    def test_code_fenced_array_is_sorted_by_confidence(self):
        text = (
            "```json\n"
            '[{"command": "ls", "description": "list", "confidence": 0.4},\n'
            ' {"command": "ls -la", "description": "list all", "confidence": 0.8}]\n'
            "```"
        )

        assert [s.command for s in parse_suggestions(text)] == ["ls -la", "ls"]

    def test_brackets_inside_strings(self):
        text = 'Here: [{"command": "ls [a-z]*", "description": "glob", "confidence": 0.6}] done'

        assert parse_suggestions(text)[0].command == "ls [a-z]*"

    def test_confidence_is_clamped_or_defaulted(self):
        text = (
            '[{"command": "a", "confidence": 1.7}, {"command": "b", "confidence": -2},'
            ' {"command": "c", "confidence": "high"}]'
        )

        confidences = {s.command: s.confidence for s in parse_suggestions(text)}

        assert confidences == {"a": 1.0, "b": 0.0, "c": 0.5}

    def test_entries_without_command_are_dropped(self):
        text = '[{"description": "no command"}, {"command": "  pwd  ", "description": "where"}]'

        suggestions = parse_suggestions(text)

        assert [s.command for s in suggestions] == ["pwd"]

    @pytest.mark.parametrize("text", [
        "I cannot help with that.",
        "[]",
        '[{"description": "nothing"}]',
    ])
    def test_unusable_responses(self, text):
        with pytest.raises(ResponseParseError):
            parse_suggestions(text)


@pytest.mark.unit
class TestParseTranslation:
    """Test translation object parsing."""

    def test_full_object(self):
        response = parse_translation(TRANSLATION_JSON)

        assert response.command == "du -sh *"
        assert response.explanation == "Show folder sizes"
        assert response.confidence == 0.8
        assert response.alternatives == ["du -h -d 1"]
        assert response.category is CommandCategory.FILE

    def test_object_in_prose_with_unknown_category(self):
        response = parse_translation('Answer: {"command": "uptime", "category": "Astrology"} ok')

        assert response.command == "uptime"
        assert response.category is CommandCategory.OTHER
        assert response.confidence == 0.5

    def test_category_aliases(self):
        assert parse_translation('{"command": "yarn", "category": "yarn"}').category is CommandCategory.NPM

    @pytest.mark.parametrize("text", ["no json here", '{"explanation": "no command"}', '{"command": "   "}'])
    def test_missing_command(self, text):
        with pytest.raises(ResponseParseError):
            parse_translation(text)

    def test_nested_object_is_decoded_whole(self):
        data = extract_json_object('x {"command": "env", "meta": {"k": 1}} y')

        assert data == {"command": "env", "meta": {"k": 1}}
