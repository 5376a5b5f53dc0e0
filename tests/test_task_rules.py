"""
Tests for the shared task rules: emoji tagging, id numbering, progress.
"""

import pytest

from app.schemas import TaskCategory, TaskProgress, TaskRecord
from app.services.task_rules import (
    build_tasks,
    category_of,
    completion_progress,
    make_task_id,
    progress_by_category,
    tag_task_text,
)


class TestTagging:
    @pytest.mark.parametrize(
        "category, emoji",
        [
            (TaskCategory.MORNING, "🌞"),
            (TaskCategory.EVENING, "🌙"),
            (TaskCategory.WEEKLY, "📅"),
        ],
    )
    def test_appends_category_emoji(self, category, emoji):
        assert tag_task_text(category, "Apply serum") == f"Apply serum {emoji}"

    def test_idempotent(self):
        once = tag_task_text(TaskCategory.EVENING, "Apply retinol")
        assert tag_task_text(TaskCategory.EVENING, once) == once

    def test_emoji_anywhere_counts(self):
        assert tag_task_text(TaskCategory.MORNING, "🌞 Wash face") == "🌞 Wash face"

    def test_other_and_manual_tasks_untagged(self):
        assert tag_task_text(TaskCategory.OTHER, "Drink more water") == "Drink more water"
        assert tag_task_text(TaskCategory.TASK, "Book dermatologist") == "Book dermatologist"


class TestNumbering:
    def test_make_task_id(self):
        assert make_task_id(TaskCategory.WEEKLY, 2) == "weekly_2"

    def test_build_tasks_starts_at_one(self):
        tasks = build_tasks(TaskCategory.MORNING, ["Cleanse", "Moisturize"])
        assert [t.id for t in tasks] == ["morning_1", "morning_2"]
        assert [t.text for t in tasks] == ["Cleanse 🌞", "Moisturize 🌞"]
        assert all(t.completed is False for t in tasks)

    def test_build_tasks_empty(self):
        assert build_tasks(TaskCategory.EVENING, []) == []

    def test_category_of(self):
        assert category_of(TaskRecord(id="evening_3", text="x")) == "evening"
        assert category_of(TaskRecord(id="task_10", text="x")) == "task"
        assert category_of(TaskRecord(id="orphan", text="x")) == "orphan"


class TestProgress:
    def test_empty_list(self):
        assert completion_progress([]) == TaskProgress(completed=0, total=0, percent=0.0)

    def test_rounded_percent(self):
        tasks = [
            TaskRecord(id="morning_1", text="a", completed=True),
            TaskRecord(id="morning_2", text="b"),
            TaskRecord(id="evening_1", text="c"),
        ]
        assert completion_progress(tasks) == TaskProgress(completed=1, total=3, percent=33.3)

    def test_by_category(self):
        tasks = [
            TaskRecord(id="morning_1", text="a", completed=True),
            TaskRecord(id="morning_2", text="b", completed=True),
            TaskRecord(id="weekly_1", text="c"),
        ]
        progress = progress_by_category(tasks)
        assert list(progress) == ["morning", "weekly"]
        assert progress["morning"].percent == 100.0
        assert progress["weekly"] == TaskProgress(completed=0, total=1, percent=0.0)
