"""
Test suite for command history tracking and persistence.
"""

import asyncio
from datetime import datetime, timedelta

import pytest

from terminal_intel.core.history import (
    HISTORY_KEY,
    CommandHistoryTracker,
    InMemoryStore,
    JsonFileStore,
    TrackedCommand,
)
from terminal_intel.utils.error_handling import ValidationError


def make_tracker(store=None, explainer=None, max_entries=100):
    return CommandHistoryTracker(
        store=store if store is not None else InMemoryStore(),
        explainer=explainer,
        max_entries=max_entries,
        working_directory="/work/repo",
        branch_lookup=lambda path: "main",
    )


@pytest.mark.unit
class TestTracking:
    """Test track, update_output and complete."""

    def test_track_records_context(self, tracker):
        entry = tracker.track("git status")

        assert entry.command == "git status"
        assert entry.git_branch == "main"
        assert entry.working_directory == "/work/repo"
        assert entry.is_complete is False
        assert entry.status == "running"
        assert entry.duration_formatted == "Running..."

    def test_track_rejects_empty_command(self, tracker):
        with pytest.raises(ValidationError):
            tracker.track("")

    def test_history_is_capped_oldest_evicted(self, tracker):
        for i in range(150):
            tracker.track(f"echo {i}")

        commands = tracker.commands
        assert len(commands) == 100
        assert commands[0].command == "echo 50"
        assert commands[-1].command == "echo 149"

    def test_returned_entries_are_copies(self, tracker):
        entry = tracker.track("ls")
        entry.output = "tampered"

        assert tracker.get(entry.id).output == ""

    def test_update_output_appends_and_replaces(self, tracker):
        entry = tracker.track("ls")

        assert tracker.update_output(entry.id, "a\n") is True
        assert tracker.update_output(entry.id, "b\n") is True
        assert tracker.get(entry.id).output == "a\nb\n"

        tracker.update_output(entry.id, "fresh", append=False)
        assert tracker.get(entry.id).output == "fresh"

    def test_unknown_ids_are_ignored(self, tracker):
        assert tracker.update_output("missing", "x") is False
        assert tracker.complete("missing", 0) is None

    def test_complete_sets_exit_code_and_end_time(self, tracker):
        entry = tracker.track("make")

        done = tracker.complete(entry.id, 0)

        assert done.is_complete
        assert done.status == "success"
        assert done.end_time >= done.start_time

    def test_complete_without_loop_skips_explanation(self):
        calls = []

        async def explainer(command, output, cwd):
            calls.append(command)
            return "never"

        tracker = make_tracker(explainer=explainer)
        entry = tracker.track("false")

        done = tracker.complete(entry.id, 1)

        assert done.status == "failed"
        assert tracker.pending_explanation(entry.id) is None
        assert calls == []

    def test_every_mutation_is_persisted(self, memory_store, tracker):
        entry = tracker.track("ls")
        assert len(memory_store.get(HISTORY_KEY)) == 1

        tracker.update_output(entry.id, "out")
        assert memory_store.get(HISTORY_KEY)[0]["output"] == "out"

        tracker.complete(entry.id, 0)
        assert memory_store.get(HISTORY_KEY)[0]["exit_code"] == 0

    def test_recent_commands(self, tracker):
        for command in ["a", "b", "c", "d"]:
            tracker.track(command)

        assert tracker.recent_commands(3) == ["b", "c", "d"]
        assert tracker.recent_commands(0) == []


@pytest.mark.unit
class TestFailureExplanations:
    """Test detached explanation tasks."""

    @pytest.mark.asyncio
    async def test_failed_command_gets_explanation(self):
        async def explainer(command, output, cwd):
            return f"{command} failed in {cwd}"

        tracker = make_tracker(explainer=explainer)
        entry = tracker.track("npm test")
        tracker.update_output(entry.id, "Error: boom")

        tracker.complete(entry.id, 1)
        task = tracker.pending_explanation(entry.id)
        assert task is not None
        await task

        assert tracker.get(entry.id).ai_explanation == "npm test failed in /work/repo"

    @pytest.mark.asyncio
    async def test_successful_command_is_not_explained(self):
        calls = []

        async def explainer(command, output, cwd):
            calls.append(command)
            return "x"

        tracker = make_tracker(explainer=explainer)
        entry = tracker.track("true")
        tracker.complete(entry.id, 0)

        assert tracker.pending_explanation(entry.id) is None
        await asyncio.sleep(0)
        assert calls == []

    @pytest.mark.asyncio
    async def test_eviction_cancels_pending_explanation(self):
        release = asyncio.Event()

        async def explainer(command, output, cwd):
            await release.wait()
            return "late"

        tracker = make_tracker(explainer=explainer, max_entries=1)
        first = tracker.track("false")
        tracker.complete(first.id, 1)
        task = tracker.pending_explanation(first.id)

        second = tracker.track("ls")

        with pytest.raises(asyncio.CancelledError):
            await task
        assert tracker.get(first.id) is None
        assert tracker.get(second.id).ai_explanation is None

    @pytest.mark.asyncio
    async def test_explainer_failure_leaves_entry_unexplained(self):
        async def explainer(command, output, cwd):
            raise RuntimeError("provider down")

        tracker = make_tracker(explainer=explainer)
        entry = tracker.track("false")
        tracker.complete(entry.id, 1)
        await tracker.pending_explanation(entry.id)

        assert tracker.get(entry.id).ai_explanation is None

    @pytest.mark.asyncio
    async def test_clear_cancels_everything(self):
        release = asyncio.Event()

        async def explainer(command, output, cwd):
            await release.wait()
            return "late"

        tracker = make_tracker(explainer=explainer)
        entry = tracker.track("false")
        tracker.complete(entry.id, 1)
        task = tracker.pending_explanation(entry.id)

        tracker.clear()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(tracker) == 0


@pytest.mark.unit
class TestTrackedCommand:
    """Test entry durations and serialization."""

    def _finished(self, seconds):
        start = datetime(2024, 1, 1, 12, 0, 0)
        entry = TrackedCommand(command="sleep", start_time=start)
        entry.finish(0, end_time=start + timedelta(seconds=seconds))
        return entry

    def test_duration_formatting(self):
        assert self._finished(0.25).duration_formatted == "250ms"
        assert self._finished(2.5).duration_formatted == "2.5s"
        assert self._finished(125).duration_formatted == "2m 5s"

    def test_end_time_never_precedes_start(self):
        entry = self._finished(-10)

        assert entry.duration == 0.0

    def test_to_dict_round_trip_keeps_fields(self):
        entry = self._finished(3)
        entry.output = "done"
        entry.git_branch = "dev"

        restored = TrackedCommand.from_dict(entry.to_dict())

        assert restored == entry
        assert "explain_task" not in entry.to_dict()


@pytest.mark.unit
class TestStatsAndSessions:
    """Test statistics, export and import."""

    def test_stats(self, tracker):
        ok = tracker.track("git status")
        bad = tracker.track("make")
        tracker.track("ls")
        tracker.complete(ok.id, 0)
        tracker.complete(bad.id, 2)

        stats = tracker.stats()

        assert stats.total_commands == 3
        assert stats.successful_commands == 1
        assert stats.failed_commands == 1
        assert stats.git_commands == 1
        assert stats.success_rate == pytest.approx(1 / 3)

    def test_stats_of_empty_history(self, tracker):
        stats = tracker.stats()

        assert stats.success_rate == 0.0
        assert stats.average_duration == 0.0

    def test_export_and_import(self, tracker):
        entry = tracker.track("cat .env")
        tracker.update_output(entry.id, "SECRET=1")

        exported = tracker.export_session("Debugging", redact=lambda text: "[hidden]")
        imported = CommandHistoryTracker.import_session(exported)

        assert exported["version"] == "1.0"
        assert imported.name == "Debugging (Imported)"
        assert [c.command for c in imported.commands] == ["cat .env"]
        assert imported.commands[0].output == "[hidden]"
        assert tracker.get(entry.id).output == "SECRET=1"

    @pytest.mark.parametrize("data", [
        {"version": "2.0", "name": "x", "commands": []},
        {"name": "x", "commands": []},
        {"version": "1.0", "commands": []},
        {"version": "1.0", "name": "x", "commands": [{"output": "no command"}]},
        ["not", "a", "dict"],
        {"version": "1.0", "name": "x", "commands": ["oops"]},
        {"version": "1.0", "name": "x", "commands": "oops"},
    ])
    def test_import_rejects_bad_exports(self, data):
        with pytest.raises(ValidationError):
            CommandHistoryTracker.import_session(data)


@pytest.mark.unit
class TestPersistence:
    """Test load/save against the stores."""

    def test_load_truncates_to_cap_and_skips_malformed(self):
        store = InMemoryStore()
        entries = [TrackedCommand(command=f"echo {i}").to_dict() for i in range(120)]
        entries.insert(5, {"output": "missing command"})
        store.set(HISTORY_KEY, entries)

        tracker = make_tracker(store=store)

        assert tracker.load() == 100
        assert tracker.commands[-1].command == "echo 119"

    def test_load_skips_entries_that_are_not_objects(self):
        store = InMemoryStore()
        store.set(HISTORY_KEY, [{"command": "ls"}, "garbage", None, 42])

        tracker = make_tracker(store=store)

        assert tracker.load() == 1
        assert tracker.commands[0].command == "ls"

    def test_load_ignores_snapshot_that_is_not_a_list(self):
        store = InMemoryStore()
        store.set(HISTORY_KEY, {"command": "ls"})

        tracker = make_tracker(store=store)

        assert tracker.load() == 0
        assert tracker.commands == []

    def test_load_from_empty_store(self, tracker):
        assert tracker.load() == 0

    def test_json_file_store_persists_across_instances(self, tmp_path):
        first = make_tracker(store=JsonFileStore(tmp_path))
        first.track("git pull")

        second = make_tracker(store=JsonFileStore(tmp_path))

        assert second.load() == 1
        assert second.commands[0].command == "git pull"

    def test_json_file_store_basics(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested")

        assert store.get("missing") is None
        store.set("terminal.workflows", [{"a": 1}])
        assert store.get("terminal.workflows") == [{"a": 1}]
        store.delete("terminal.workflows")
        store.delete("terminal.workflows")
        assert store.get("terminal.workflows") is None
