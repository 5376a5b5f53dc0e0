"""
Task list repository: all DB access in one place.
"""

import logging
import random
import time
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.db import TaskList
from app.schemas import TaskCategory, TaskRecord
from app.services.task_rules import category_of, make_task_id

logger = logging.getLogger(__name__)


def new_photo_id() -> str:
    """'<epoch ms>-<0..999>' identifier for an analysed photo."""
    return f"{int(time.time() * 1000)}-{random.randint(0, 999)}"


def _load_tasks(task_list: TaskList) -> list[TaskRecord]:
    return [TaskRecord.model_validate(item) for item in task_list.tasks_json or []]


def _dump_tasks(tasks: list[TaskRecord]) -> list[dict]:
    return [task.model_dump(mode="json") for task in tasks]


class TaskRepository:
    """Single repository for task list storage."""

    async def _get(self, db: AsyncSession, photo_id: str) -> Optional[TaskList]:
        result = await db.execute(select(TaskList).where(TaskList.photo_id == photo_id))
        return result.scalar_one_or_none()

    async def store_tasks(
        self, db: AsyncSession, tasks: list[TaskRecord], photo_id: str
    ) -> TaskList:
        task_list = await self._get(db, photo_id)
        if task_list is None:
            task_list = TaskList(photo_id=photo_id)
        task_list.tasks_json = _dump_tasks(tasks)
        db.add(task_list)
        await db.commit()
        await db.refresh(task_list)
        logger.info(f"Stored {len(tasks)} tasks for photo {photo_id}")
        return task_list

    async def get_latest(self, db: AsyncSession) -> Optional[TaskList]:
        result = await db.execute(
            select(TaskList).order_by(TaskList.created_at.desc(), TaskList.id.desc()).limit(1)
        )
        return result.scalar_one_or_none()

    async def get_latest_tasks(self, db: AsyncSession) -> Optional[list[TaskRecord]]:
        task_list = await self.get_latest(db)
        return _load_tasks(task_list) if task_list else None

    async def get_latest_photo_id(self, db: AsyncSession) -> Optional[str]:
        task_list = await self.get_latest(db)
        return task_list.photo_id if task_list else None

    async def get_tasks_for_photo(
        self, db: AsyncSession, photo_id: str
    ) -> Optional[list[TaskRecord]]:
        task_list = await self._get(db, photo_id)
        return _load_tasks(task_list) if task_list else None

    async def set_task_completed(
        self,
        db: AsyncSession,
        photo_id: str,
        task_id: str,
        completed: Optional[bool] = None,
    ) -> Optional[list[TaskRecord]]:
        """Set (or toggle, when completed is None) one task's completion flag."""
        task_list = await self._get(db, photo_id)
        if task_list is None:
            return None

        tasks = _load_tasks(task_list)
        target = next((task for task in tasks if task.id == task_id), None)
        if target is None:
            return None
        target.completed = (not target.completed) if completed is None else completed

        task_list.tasks_json = _dump_tasks(tasks)
        await db.commit()
        return tasks

    async def add_task(
        self, db: AsyncSession, photo_id: str, text: str
    ) -> Optional[list[TaskRecord]]:
        """Append a hand-written task ('task_<n>') to a photo's list."""
        text = text.strip()
        if not text:
            raise ValueError("Task text must not be blank")

        task_list = await self._get(db, photo_id)
        if task_list is None:
            return None

        tasks = _load_tasks(task_list)
        n = sum(1 for task in tasks if category_of(task) == TaskCategory.TASK.value) + 1
        tasks.append(TaskRecord(id=make_task_id(TaskCategory.TASK, n), text=text))

        task_list.tasks_json = _dump_tasks(tasks)
        await db.commit()
        return tasks
