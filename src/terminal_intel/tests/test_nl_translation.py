"""
Test suite for natural-language translation: rule table and AI fallback.
"""

import pytest

from terminal_intel.core.suggestions import NLPatternMatcher, NLTranslator, TerminalAssistant, UNRECOGNIZED_COMMAND
from terminal_intel.core.types import CommandCategory, CommandContext
from terminal_intel.tests.fixtures.fakes import TRANSLATION_JSON, FakeProvider


@pytest.fixture
def matcher():
    return NLPatternMatcher()


@pytest.mark.unit
class TestNLPatternMatcher:
    """Test the regex rule table."""

    def test_status(self, matcher):
        response = matcher.match("show me the status")

        assert response.command == "git status"
        assert response.category is CommandCategory.GIT
        assert response.confidence == 0.9
        assert response.alternatives == ["git status --porcelain", "git status -s"]

    def test_delete_file_carries_warning(self, matcher):
        response = matcher.match("delete file notes.txt")

        assert response.command == "rm {{file}}"
        assert response.warnings == ["This will permanently delete the file"]
        assert response.has_placeholders

    def test_kill_process(self, matcher):
        response = matcher.match("kill the process")

        assert response.command == "kill {{pid}}"
        assert response.alternatives == ["kill -9 {{pid}}"]
        assert response.category is CommandCategory.SYSTEM

    def test_create_branch(self, matcher):
        assert matcher.match("Create a new branch").command == "git branch {{name}}"

    def test_branch_placeholder_filled_from_context(self, matcher):
        response = matcher.match("push my changes", CommandContext(git_branch="main"))

        assert response.command == "git push"
        assert response.alternatives == ["git push origin main"]

    def test_branch_placeholder_left_without_context(self, matcher):
        assert matcher.match("push my changes").alternatives == ["git push origin {{branch}}"]

    def test_find_files_alternative_searches_content(self, matcher):
        response = matcher.match("find file named notes")

        assert response.command == 'find . -name "{{pattern}}"'
        assert response.alternatives == ['grep -r "{{pattern}}" .']

    @pytest.mark.parametrize("text", ["", "   ", "reticulate splines"])
    def test_no_match(self, matcher, text):
        assert matcher.match(text) is None


@pytest.mark.unit
class TestNLTranslator:
    """Test rule-first translation with AI fallback."""

    @pytest.mark.asyncio
    async def test_rule_match_skips_providers(self):
        local = FakeProvider(responses=[TRANSLATION_JSON])
        translator = NLTranslator(TerminalAssistant(local))

        response = await translator.translate("show me the status")

        assert response.command == "git status"
        assert local.generate_calls == []

    @pytest.mark.asyncio
    async def test_unmatched_request_goes_to_ai(self):
        local = FakeProvider(responses=[TRANSLATION_JSON])
        translator = NLTranslator(TerminalAssistant(local))

        response = await translator.translate("how big are my folders")

        assert response.command == "du -sh *"
        assert response.alternatives == ["du -h -d 1"]
        assert response.category is CommandCategory.FILE
        assert len(local.generate_calls) == 1
        assert "how big are my folders" in local.generate_calls[0].prompt

    @pytest.mark.asyncio
    async def test_cloud_used_when_local_is_down(self, local_provider):
        cloud = FakeProvider("cloud", responses=[TRANSLATION_JSON])
        translator = NLTranslator(TerminalAssistant(local_provider, cloud))

        response = await translator.translate("how big are my folders")

        assert response.command == "du -sh *"
        assert local_provider.generate_calls == []

    @pytest.mark.asyncio
    async def test_all_providers_failing_gives_unrecognized(self, local_provider, cloud_provider):
        translator = NLTranslator(TerminalAssistant(local_provider, cloud_provider))

        response = await translator.translate("how big are my folders")

        assert response.command == UNRECOGNIZED_COMMAND
        assert response.confidence == 0.1

    @pytest.mark.asyncio
    async def test_unparseable_answer_gives_unrecognized(self):
        translator = NLTranslator(TerminalAssistant(FakeProvider(responses=["no idea, sorry"])))

        response = await translator.translate("how big are my folders")

        assert response.command == UNRECOGNIZED_COMMAND

    @pytest.mark.asyncio
    async def test_without_assistant(self):
        response = await NLTranslator().translate("how big are my folders")

        assert response.command == UNRECOGNIZED_COMMAND

    @pytest.mark.asyncio
    async def test_explain_command(self):
        translator = NLTranslator(TerminalAssistant(FakeProvider(responses=["Lists files in long format."])))

        assert await translator.explain_command("ls -l") == "Lists files in long format."

    @pytest.mark.asyncio
    async def test_explain_command_fallback(self, local_provider):
        translator = NLTranslator(TerminalAssistant(local_provider))

        assert (await translator.explain_command("ls -l")).startswith("Command: ls -l")
