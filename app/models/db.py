"""
SQLAlchemy models: one table.

`task_lists`: the routine task list generated for each analysed photo
(tasks stored as a JSON list of TaskRecord dicts)
"""

from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from app.database import Base


class TaskList(Base):
    __tablename__ = "task_lists"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    photo_id = Column(String(64), unique=True, nullable=False, index=True)
    tasks_json = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<TaskList(id={self.id}, photo={self.photo_id})>"
