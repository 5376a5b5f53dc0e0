"""
Pydantic schemas: the single source of truth for all data contracts.

TaskRecord is the handoff contract between the parser / routine builder and
everything downstream (storage, HTTP responses). It is stored as JSON in the DB.
"""

from __future__ import annotations

import enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints


# ── Enums ────────────────────────────────────────────────────────────────────


class TaskCategory(str, enum.Enum):
    MORNING = "morning"
    EVENING = "evening"
    WEEKLY = "weekly"
    OTHER = "other"  # line-scan catch-all
    TASK = "task"  # added by hand


class ParseStage(str, enum.Enum):
    MARKERS = "markers"
    SECTIONS = "sections"
    LINE_SCAN = "line_scan"
    DEFAULT = "default"


class StageOutcome(str, enum.Enum):
    EMPTY = "empty"
    TASKS = "tasks"


# ── Tasks ────────────────────────────────────────────────────────────────────


class TaskRecord(BaseModel):
    """A single checkable routine task."""

    id: str = Field(description="'<category>_<n>', n is 1-based per category")
    text: str
    completed: bool = False


class StageResult(BaseModel):
    """Outcome of one parser stage (EMPTY or TASKS)."""

    stage: ParseStage
    outcome: StageOutcome
    tasks: list[TaskRecord] = Field(default_factory=list)

    @classmethod
    def empty(cls, stage: ParseStage) -> StageResult:
        return cls(stage=stage, outcome=StageOutcome.EMPTY)

    @classmethod
    def of(cls, stage: ParseStage, tasks: list[TaskRecord]) -> StageResult:
        if not tasks:
            return cls.empty(stage)
        return cls(stage=stage, outcome=StageOutcome.TASKS, tasks=tasks)


class ParseResult(BaseModel):
    """Final parser output plus the stage that produced it."""

    stage: ParseStage
    tasks: list[TaskRecord]

    @property
    def used_default(self) -> bool:
        return self.stage == ParseStage.DEFAULT


class TaskProgress(BaseModel):
    completed: int = 0
    total: int = 0
    percent: float = 0.0


# ── Condition knowledge base ─────────────────────────────────────────────────


class Treatments(BaseModel):
    model_config = ConfigDict(frozen=True)

    topical: tuple[str, ...] = ()
    lifestyle: tuple[str, ...] = ()
    professional: tuple[str, ...] = ()


class SeverityScale(BaseModel):
    model_config = ConfigDict(frozen=True)

    mild: str
    moderate: str
    severe: str


class SkinCondition(BaseModel):
    """Catalog entry: immutable, loaded once at import."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    aliases: tuple[str, ...] = ()  # alternate names also matched by detection
    description: str
    causes: tuple[str, ...] = ()
    treatments: Treatments = Field(default_factory=Treatments)
    severity: SeverityScale


class Routine(BaseModel):
    """Three-part routine of free-text steps (not yet TaskRecords)."""

    morning: list[str] = Field(default_factory=list)
    evening: list[str] = Field(default_factory=list)
    weekly: list[str] = Field(default_factory=list)


# ── HTTP request / response bodies ───────────────────────────────────────────


class ParseRequest(BaseModel):
    response: str = Field(description="Raw model completion")


class DetectRequest(BaseModel):
    text: str


class DetectResponse(BaseModel):
    conditions: list[str] = Field(default_factory=list)


class RoutineRequest(BaseModel):
    conditions: list[str] = Field(default_factory=list)


class NarrativeRequest(BaseModel):
    text: str = Field(description="Narrative skin analysis")


class AnalysisResponse(BaseModel):
    analysis: str
    conditions: list[str] = Field(default_factory=list)


class TaskListResponse(BaseModel):
    photo_id: str
    tasks: list[TaskRecord]


class AddTaskRequest(BaseModel):
    text: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ProgressResponse(BaseModel):
    overall: TaskProgress
    by_category: dict[str, TaskProgress] = Field(default_factory=dict)
