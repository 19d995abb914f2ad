from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


# ===== Task =====
class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(min_length=1)
    description: Optional[str] = None
    done: bool = Field(default=False)
    # Assigned by the store on insert: max(position) + 1, or 0 for the first task
    position: Optional[int] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ===== TaskRelationship =====
class TaskRelationship(SQLModel, table=True):
    """Directed parent -> child link between two tasks."""

    __tablename__ = "task_relationships"

    parent_id: int = Field(foreign_key="tasks.id", primary_key=True, ondelete="CASCADE")
    child_id: int = Field(foreign_key="tasks.id", primary_key=True, ondelete="CASCADE")
