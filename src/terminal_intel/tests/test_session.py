"""
Integration tests for a fully wired terminal session.
"""

import pytest

from terminal_intel.session import TerminalSession
from terminal_intel.tests.fixtures.fakes import FakeProvider
from terminal_intel.utils.error_handling import ValidationError


@pytest.fixture
def make_session(test_config, writer, memory_store, tmp_path):
    def factory(local=None, cloud=None, config=None):
        return TerminalSession(
            config or test_config,
            writer=writer,
            store=memory_store,
            providers=(local or FakeProvider(healthy=False), cloud or FakeProvider("cloud", healthy=False)),
            working_directory=str(tmp_path),
        )
    return factory


@pytest.mark.integration
class TestTerminalSession:
    """Test the session facade end to end with fake providers."""

    def test_submit_writes_and_tracks(self, make_session, writer):
        session = make_session()

        tracked = session.submit("ls -la")

        assert writer.written == ["ls -la\n"]
        assert [c.command for c in session.history()] == ["ls -la"]
        assert tracked.working_directory == session.working_directory

    def test_render_output_is_redacted(self, make_session):
        session = make_session()
        tracked = session.submit("cat .env")
        session.record_output(tracked.id, "password: hunter2222\n")

        text, secrets = session.render_output(tracked.id)

        assert "hunter2222" not in text
        assert [s.category.value for s in secrets] == ["Password"]

    def test_render_output_without_redaction(self, make_session, test_config):
        config = test_config.model_copy(update={"redaction": test_config.redaction.model_copy(update={"enabled": False})})
        session = make_session(config=config)
        tracked = session.submit("cat .env")
        session.record_output(tracked.id, "password: hunter2222\n")

        assert session.render_output(tracked.id).text == "password: hunter2222\n"

    def test_render_output_unknown_id(self, make_session):
        with pytest.raises(ValidationError):
            make_session().render_output("missing")

    def test_execute_workflow(self, make_session, writer):
        session = make_session()
        commit = session.workflows.find_by_name("Git Commit")

        with pytest.raises(ValidationError, match="message"):
            session.execute_workflow(commit, {})
        assert writer.written == []

        session.execute_workflow(commit, {"message": "fix bug"})
        assert writer.written == ['git commit -m "fix bug"\n']

    def test_export_history_masks_secrets(self, make_session):
        session = make_session()
        tracked = session.submit("env")
        session.record_output(tracked.id, "password: hunter2222")

        exported = session.export_history("Shared")

        assert "hunter2222" not in str(exported)
        assert exported["commands"][0]["command"] == "env"

    def test_context_uses_recent_commands(self, make_session):
        session = make_session()
        for command in ["a", "b", "c", "d"]:
            session.submit(command)

        assert session.context().recent_commands == ["b", "c", "d"]

    @pytest.mark.asyncio
    async def test_failed_command_is_explained(self, make_session):
        local = FakeProvider(responses=["The file does not exist."])
        session = make_session(local=local)
        tracked = session.submit("cat missing.txt")
        session.record_output(tracked.id, "cat: missing.txt: No such file or directory")

        session.complete(tracked.id, 1)
        await session.tracker.pending_explanation(tracked.id)

        assert session.tracker.get(tracked.id).ai_explanation == "The file does not exist."
        await session.aclose()

    @pytest.mark.asyncio
    async def test_explain_error_falls_back_to_generic_message(self, make_session):
        session = make_session()
        tracked = session.submit("make")

        message = await session.explain_error(tracked.id)

        assert "Unable to get AI explanation for `make`" in message

    @pytest.mark.asyncio
    async def test_suggestions_fall_back_to_static_table(self, make_session):
        changes = []
        session = make_session()
        session.orchestrator.on_change = changes.append

        task = session.update_input("docker")
        await task

        assert changes[-1][0].command == "docker ps"

    @pytest.mark.asyncio
    async def test_translate_uses_rules(self, make_session):
        response = await make_session().translate("list all containers")

        assert response.command == "docker ps"

    @pytest.mark.asyncio
    async def test_aclose_is_idempotent_and_closes_providers(self, make_session):
        local = FakeProvider(healthy=False)
        cloud = FakeProvider("cloud", healthy=False)
        session = make_session(local=local, cloud=cloud)

        async with session:
            session.update_input("git s")

        await session.aclose()
        assert local.closed and cloud.closed
        assert session.orchestrator.pending is None
