from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


# ===== Task Response =====
class TaskResponse(BaseModel):
    """Task with its derived relationship ids."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    done: bool
    position: int
    created_at: datetime
    child_tasks: List[int] = []
    parent_tasks: List[int] = []


class TaskCreatedResponse(BaseModel):
    """Echo of a newly created task. Relationship ids are not included."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
