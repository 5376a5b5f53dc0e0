"""
Task parser: turns a model completion into a checkable task list.

Stages are tried in order; the first one that yields tasks wins:
1. Strict BEGIN_<X>_TASKS / TASK: / END_<X>_TASKS marker blocks
2. Loose "<category> ... tasks" sections
3. Any line that reads like a skincare action
4. Hardcoded default list (also returned on any error)

The parser never raises to its caller.
"""

import logging
import re
from collections import Counter
from typing import Callable

from app.schemas import (
    ParseResult,
    ParseStage,
    StageOutcome,
    StageResult,
    TaskCategory,
    TaskRecord,
)
from app.services.task_rules import (
    ROUTINE_CATEGORIES,
    build_tasks,
    make_task_id,
    tag_task_text,
)

logger = logging.getLogger(__name__)

TASK_PREFIX = "TASK:"

DEFAULT_TASKS: tuple[tuple[str, str], ...] = (
    ("morning_1", "Cleanse with gentle cleanser 🌞"),
    ("morning_2", "Apply moisturizer 🌞"),
    ("morning_3", "Apply sunscreen SPF 30+ 🌞"),
    ("evening_1", "Double cleanse to remove makeup/sunscreen 🌙"),
    ("evening_2", "Apply treatment serum 🌙"),
    ("evening_3", "Apply moisturizer 🌙"),
    ("weekly_1", "Exfoliate once a week 📅"),
    ("weekly_2", "Use a hydrating mask 📅"),
)


def default_tasks() -> list[TaskRecord]:
    """Fresh copy of the fallback task list."""
    return [TaskRecord(id=task_id, text=text) for task_id, text in DEFAULT_TASKS]


def normalize_response(response: str) -> str:
    return response.replace("\r\n", "\n").strip()


# ── Stage 1: strict markers ─────────────────────────────────────────────────


def _marker_pattern(category: TaskCategory) -> re.Pattern:
    name = category.value.upper()
    return re.compile(rf"BEGIN_{name}_TASKS\n([\s\S]*?)\nEND_{name}_TASKS")


_MARKER_PATTERNS = {category: _marker_pattern(category) for category in ROUTINE_CATEGORIES}


def parse_marker_sections(text: str) -> StageResult:
    tasks: list[TaskRecord] = []
    for category, pattern in _MARKER_PATTERNS.items():
        match = pattern.search(text)
        if not match:
            logger.debug(f"{category.value} tasks section not found")
            continue
        if not match.group(1):
            logger.debug(f"{category.value} tasks section is empty")
            continue

        lines = [
            line.strip()[len(TASK_PREFIX):].strip()
            for line in match.group(1).split("\n")
            if line.strip().startswith(TASK_PREFIX)
        ]
        logger.debug(f"Found {len(lines)} {category.value} tasks")
        tasks.extend(build_tasks(category, lines))

    return StageResult.of(ParseStage.MARKERS, tasks)


# ── Stage 2: loose sections ─────────────────────────────────────────────────


def _section_pattern(category: TaskCategory) -> re.Pattern:
    # `.` stops at newlines, so the capture is the tail of the line that runs
    # into the next category keyword (or the end of the text).
    others = "|".join(c.value for c in ROUTINE_CATEGORIES if c != category)
    return re.compile(
        rf"{category.value}[\s\S]*?tasks?[\s\S]*?(.*?)({others}|$)",
        re.IGNORECASE,
    )


_SECTION_PATTERNS = {category: _section_pattern(category) for category in ROUTINE_CATEGORIES}


def _is_section_task_line(line: str) -> bool:
    return (
        len(line) > 10
        and not line.startswith("#")
        and not re.search(r"task", line, re.IGNORECASE)
        and not re.search(r"routine", line, re.IGNORECASE)
        and not re.match(r"[0-9]+\.", line)
    )


def parse_loose_sections(text: str) -> StageResult:
    tasks: list[TaskRecord] = []
    for category, pattern in _SECTION_PATTERNS.items():
        match = pattern.search(text)
        if not match or not match.group(1):
            continue
        lines = [line.strip() for line in match.group(1).split("\n")]
        tasks.extend(build_tasks(category, [line for line in lines if _is_section_task_line(line)]))

    return StageResult.of(ParseStage.SECTIONS, tasks)


# ── Stage 3: line scan ──────────────────────────────────────────────────────


ACTION_KEYWORDS = ("cleanse", "apply", "use", "moisturize", "exfoliate", "sunscreen")


def classify_line(line: str) -> TaskCategory:
    lower = line.lower()
    if "morning" in lower or "🌞" in line:
        return TaskCategory.MORNING
    if "evening" in lower or "night" in lower or "🌙" in line:
        return TaskCategory.EVENING
    if "weekly" in lower or "once a week" in lower or "📅" in line:
        return TaskCategory.WEEKLY
    return TaskCategory.OTHER


def _is_action_line(line: str) -> bool:
    lower = line.lower()
    return (
        len(line) > 10
        and "BEGIN_" not in line
        and "END_" not in line
        and any(keyword in lower for keyword in ACTION_KEYWORDS)
    )


def scan_task_lines(text: str) -> StageResult:
    counters: Counter = Counter()
    tasks: list[TaskRecord] = []
    for raw in text.split("\n"):
        line = raw.strip()
        if not _is_action_line(line):
            continue
        category = classify_line(line)
        counters[category] += 1
        tasks.append(
            TaskRecord(
                id=make_task_id(category, counters[category]),
                text=tag_task_text(category, line),
            )
        )

    return StageResult.of(ParseStage.LINE_SCAN, tasks)


# ── Pipeline ────────────────────────────────────────────────────────────────


STAGES: tuple[Callable[[str], StageResult], ...] = (
    parse_marker_sections,
    parse_loose_sections,
    scan_task_lines,
)


def parse_tasks_with_stage(response: str) -> ParseResult:
    """Run the stages in order and report which one produced the tasks."""
    try:
        text = normalize_response(response)
        logger.debug(f"Response preview: {text[:100]}")

        for stage in STAGES:
            result = stage(text)
            if result.outcome == StageOutcome.TASKS:
                logger.info(f"Extracted {len(result.tasks)} tasks | Stage: {result.stage.value}")
                return ParseResult(stage=result.stage, tasks=result.tasks)
            logger.warning(f"No tasks found by stage '{result.stage.value}', trying next")

    except Exception as e:
        logger.error(f"Error parsing tasks from AI response: {e}", exc_info=True)

    logger.warning("Falling back to default task list")
    return ParseResult(stage=ParseStage.DEFAULT, tasks=default_tasks())


def parse_tasks(response: str) -> list[TaskRecord]:
    return parse_tasks_with_stage(response).tasks
