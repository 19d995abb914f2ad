import math
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def coerce_done(value: Any) -> bool:
    """Coerce a loosely typed completion flag the way JavaScript truthiness does.

    Null, false, zero, NaN and the empty string are false. Everything else is
    true, including "0", "false" and empty arrays or objects.
    """
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


class TaskCreate(BaseModel):
    """Request schema for creating a task.

    ``title`` is optional here so that its absence is reported with a
    dedicated message by the router rather than a generic validation error.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    parent_tasks: List[int] = Field(default_factory=list, alias="parentTasks")
    child_tasks: List[int] = Field(default_factory=list, alias="childTasks")

    @field_validator("parent_tasks", "child_tasks", mode="before")
    @classmethod
    def default_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class ReorderRequest(BaseModel):
    """Request schema for reordering tasks: ids in their new display order."""

    tasks: Optional[List[int]] = None

    @field_validator("tasks", mode="before")
    @classmethod
    def reject_non_list(cls, v: Any) -> Any:
        # Anything that is not an array is treated as absent
        return v if isinstance(v, list) else None


class TaskDoneUpdate(BaseModel):
    done: bool = False

    @field_validator("done", mode="before")
    @classmethod
    def parse_done(cls, v: Any) -> bool:
        return coerce_done(v)
