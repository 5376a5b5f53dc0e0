"""
Task normalization rules shared by every parser stage and the routine builder.

- Category emoji tagging (idempotent)
- "<category>_<n>" id numbering, restarting at 1 per category
- Completion progress over a task list
"""

from typing import Iterable

from app.schemas import TaskCategory, TaskProgress, TaskRecord

CATEGORY_EMOJI: dict[TaskCategory, str] = {
    TaskCategory.MORNING: "🌞",
    TaskCategory.EVENING: "🌙",
    TaskCategory.WEEKLY: "📅",
}

# Order used when listing tasks and when several routine sections are flattened
ROUTINE_CATEGORIES = (TaskCategory.MORNING, TaskCategory.EVENING, TaskCategory.WEEKLY)


def tag_task_text(category: TaskCategory, text: str) -> str:
    """Append the category emoji unless the text already contains it."""
    emoji = CATEGORY_EMOJI.get(category)
    if emoji is None or emoji in text:
        return text
    return f"{text} {emoji}"


def make_task_id(category: TaskCategory, n: int) -> str:
    return f"{category.value}_{n}"


def build_tasks(category: TaskCategory, lines: Iterable[str]) -> list[TaskRecord]:
    """Turn one category's lines into tagged, 1-based numbered task records."""
    return [
        TaskRecord(id=make_task_id(category, i), text=tag_task_text(category, line))
        for i, line in enumerate(lines, start=1)
    ]


def category_of(task: TaskRecord) -> str:
    """Category prefix of a task id ('morning_2' → 'morning')."""
    prefix, _, _ = task.id.rpartition("_")
    return prefix or task.id


def completion_progress(tasks: list[TaskRecord]) -> TaskProgress:
    total = len(tasks)
    if total == 0:
        return TaskProgress()
    completed = sum(1 for task in tasks if task.completed)
    return TaskProgress(
        completed=completed,
        total=total,
        percent=round(completed / total * 100, 1),
    )


def progress_by_category(tasks: list[TaskRecord]) -> dict[str, TaskProgress]:
    grouped: dict[str, list[TaskRecord]] = {}
    for task in tasks:
        grouped.setdefault(category_of(task), []).append(task)
    return {category: completion_progress(items) for category, items in grouped.items()}
