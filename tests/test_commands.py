# tests/test_commands.py

from __future__ import annotations

import json

from task_tracker.cli.commands import CommandRegistry, registry
from task_tracker.tasks.task_models import Category, Priority


def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    called: list[list[str]] = []

    def handler(state, args):
        called.append(args)
        return "ok"

    reg.register("a", handler, "a", aliases=["alpha"])

    assert reg.handle(state, '/a x "y z"') == "ok"
    assert reg.handle(state, "/ALPHA") == "ok"
    assert called == [["x", "y z"], []]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")
    assert (reg.handle(state, '/a "unterminated') or "").startswith("Error")


def test_help_lists_commands(state) -> None:
    text = registry.handle(state, "/help") or ""
    for name in ("/add", "/filter", "/stats", "/upcoming", "/export", "/exit"):
        assert name in text


def test_add_creates_task(state) -> None:
    reply = registry.handle(
        state,
        '/add Buy milk desc="2 litres" due=2024-01-05 priority=3 category=shopping hours=1 tags=Home,errand',
    )
    assert reply is not None and reply.startswith("Task added successfully!")

    task = state.tasks.get(1)
    assert task.title == "Buy milk"
    assert task.description == "2 litres"
    assert task.priority is Priority.HIGH
    assert task.category is Category.SHOPPING
    assert task.estimated_hours == 1
    assert task.tags == ["home", "errand"]
    assert state.dirty is True


def test_add_defaults_and_past_warning(state) -> None:
    reply = registry.handle(state, "/add Old thing due=2023-12-01") or ""
    assert "Warning: Due date is in the past!" in reply
    task = state.tasks.get(1)
    assert task.priority is Priority.MEDIUM
    assert task.category is Category.OTHER


def test_add_errors_are_replies(state) -> None:
    assert "Due date is required" in (registry.handle(state, "/add Something") or "")
    assert "Invalid date" in (registry.handle(state, "/add x due=tomorrow") or "")
    assert "Title cannot be empty" in (registry.handle(state, "/add due=2024-01-05") or "")
    assert "Invalid priority" in (registry.handle(state, "/add x due=2024-01-05 priority=9") or "")
    assert "Unknown option" in (registry.handle(state, "/add x due=2024-01-05 colour=red") or "")
    assert len(state.tasks) == 0
    assert state.tasks.next_id == 1


def test_update_changes_only_given_fields(state, clock) -> None:
    registry.handle(state, "/add Draft due=2024-01-05 priority=low")
    task = state.tasks.get(1)
    clock.advance(minutes=10)

    reply = registry.handle(state, '/update 1 title="Final draft" priority=urgent category=2') or ""

    assert reply.startswith("Task updated successfully!")
    assert task.title == "Final draft"
    assert task.priority is Priority.URGENT
    assert task.category is Category.PERSONAL
    assert task.due_date.isoformat() == "2024-01-05"
    assert task.last_modified_at == clock.now()


def test_update_with_bad_value_leaves_task_untouched(state, clock) -> None:
    registry.handle(state, "/add Draft due=2024-01-05")
    task = state.tasks.get(1)
    stamp = task.last_modified_at
    clock.advance(minutes=1)

    reply = registry.handle(state, "/update 1 title=New due=someday") or ""

    assert reply.startswith("Error")
    assert task.title == "Draft"
    assert task.last_modified_at == stamp


def test_missing_id_reports_not_found(state) -> None:
    for cmd in ("/done 9", "/undone 9", "/show 9", "/delete 9", "/tag 9 add x", "/update 9 title=x"):
        assert "Task not found with ID: 9" in (registry.handle(state, cmd) or ""), cmd
    assert "Invalid ID format" in (registry.handle(state, "/done abc") or "")


def test_done_undone_delete_flow(state) -> None:
    registry.handle(state, "/add One due=2024-01-05")
    registry.handle(state, "/add Two due=2024-01-06")

    assert "marked as complete" in (registry.handle(state, "/done 1") or "")
    assert state.tasks.get(1).completed
    assert "No pending" not in (registry.handle(state, "/pending") or "")
    assert "marked as incomplete" in (registry.handle(state, "/undone 1") or "")
    assert not state.tasks.get(1).completed

    assert registry.handle(state, "/rm 2") == "Task 2 deleted."
    assert 2 not in state.tasks
    registry.handle(state, "/add Three due=2024-01-07")
    assert state.tasks.get(3).title == "Three"


def test_list_search_filter_sort(state) -> None:
    assert registry.handle(state, "/list") == "No tasks available."
    registry.handle(state, "/add Alpha due=2024-01-03 priority=low category=work tags=Focus")
    registry.handle(state, "/add Beta due=2024-01-02 priority=urgent category=study")

    listing = registry.handle(state, "/list") or ""
    assert listing.startswith("ALL TASKS")
    assert listing.endswith("Total: 2 tasks")

    assert "Found: 1 tasks" in (registry.handle(state, "/search FOCUS") or "")
    assert "No tasks found matching: zeta" == registry.handle(state, "/search Zeta")

    by_cat = registry.handle(state, "/filter category study") or ""
    assert "[2] Beta" in by_cat and "[1] Alpha" not in by_cat
    assert "Invalid status" in (registry.handle(state, "/filter status archived") or "")
    assert "[1] Alpha" in (registry.handle(state, "/filter tag focus") or "")
    assert registry.handle(state, "/filter overdue") == "No tasks match the filter."

    sorted_reply = registry.handle(state, "/sort priority") or ""
    assert sorted_reply.index("[2] Beta") < sorted_reply.index("[1] Alpha")
    assert "Invalid sort key" in (registry.handle(state, "/sort size") or "")


def test_tag_command(state, clock) -> None:
    registry.handle(state, "/add Gym due=2024-01-03")
    state.dirty = False

    assert "Tag added!" in (registry.handle(state, "/tag 1 add Legs") or "")
    assert "Tag already present." in (registry.handle(state, "/tag 1 add legs") or "")
    assert registry.handle(state, "/tag 1") == "Current tags: legs"

    state.dirty = False
    assert "Tag not found." in (registry.handle(state, "/tag 1 remove arms") or "")
    assert state.dirty is False
    assert "Tag removed!" in (registry.handle(state, "/tag 1 remove LEGS") or "")
    assert state.tasks.get(1).tags == []


def test_stats_command(state) -> None:
    registry.handle(state, "/add A due=2024-01-10 priority=low category=work")
    registry.handle(state, "/add B due=2024-01-05 priority=urgent category=work")
    registry.handle(state, "/add C due=2024-01-20 category=health")
    registry.handle(state, "/done 3")

    text = registry.handle(state, "/stats") or ""
    assert "Total Tasks: 3" in text
    assert "Completed: 1 (33.3%)" in text
    assert "Pending: 2" in text
    assert "  WORK: 2" in text
    assert "  HEALTH: 1" in text
    assert "Most Urgent Task: B (Due: 2024-01-05)" in text


def test_upcoming_command(state) -> None:
    registry.handle(state, "/add Soon due=2024-01-03")
    registry.handle(state, "/add Later due=2024-01-20")

    reply = registry.handle(state, "/upcoming 5") or ""
    assert "[1] Soon" in reply and "Later" not in reply
    assert "Next 7 days" in (registry.handle(state, "/upcoming") or "")
    assert "non-negative" in (registry.handle(state, "/upcoming -2") or "")


def test_export_command(state, settings) -> None:
    registry.handle(state, "/add Export me due=2024-01-03")
    reply = registry.handle(state, "/export") or ""
    assert reply.startswith("Exported 1 tasks")
    assert "Export me" in settings.export_path.read_text("utf-8")


def test_autosave_writes_snapshot(state, settings) -> None:
    settings.autosave = True
    registry.handle(state, "/add Saved due=2024-01-03")

    data = json.loads(settings.snapshot_path.read_text("utf-8"))
    assert [t["title"] for t in data["tasks"]] == ["Saved"]
    assert state.dirty is False
