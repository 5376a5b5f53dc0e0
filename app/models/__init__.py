from app.models.db import TaskList

__all__ = [
    "TaskList",
]
