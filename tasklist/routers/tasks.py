from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from tasklist.database import get_session
from tasklist.exceptions import BadRequestException, NotFoundException
from tasklist.schemas.common import MessageResponse
from tasklist.schemas.requests import ReorderRequest, TaskCreate, TaskDoneUpdate
from tasklist.schemas.responses import TaskCreatedResponse, TaskResponse
from tasklist.services.base import is_storable_id
from tasklist.services.task_service import TaskService

router = APIRouter()
service = TaskService()

DONE_LABEL = "Selesai"
NOT_DONE_LABEL = "Belum Selesai"


def parse_task_id(id: str) -> int:
    """Path id as an integer; anything that cannot name a task is not found."""
    try:
        task_id = int(id)
    except ValueError:
        raise NotFoundException()
    if not is_storable_id(task_id):
        raise NotFoundException()
    return task_id


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    session: AsyncSession = Depends(get_session),
):
    """Get all tasks in display order with their parent and child ids."""
    return await service.list_with_relationships(session)


@router.post("", response_model=TaskCreatedResponse)
async def create_task(
    task_create: TaskCreate,
    session: AsyncSession = Depends(get_session),
):
    """Create a task at the end of the list, linked to the given tasks."""
    if not task_create.title:
        raise BadRequestException("Title is required")

    return await service.create_task(
        session,
        title=task_create.title,
        description=task_create.description,
        parent_ids=task_create.parent_tasks,
        child_ids=task_create.child_tasks,
    )


# Must be registered before "/{id}"
@router.put("/reorder", response_model=MessageResponse)
async def reorder_tasks(
    request: Optional[ReorderRequest] = None,
    session: AsyncSession = Depends(get_session),
):
    """Set each task's position to its index in the submitted list."""
    if request is None or request.tasks is None:
        raise BadRequestException("Tasks must be an array")

    await service.reorder(session, request.tasks)
    return MessageResponse(message="Tasks reordered successfully")


@router.put("/{id}", response_model=MessageResponse)
async def update_task_status(
    id: str,
    update: Optional[TaskDoneUpdate] = None,
    session: AsyncSession = Depends(get_session),
):
    """Mark a task done or not done."""
    task_id = parse_task_id(id)
    done = update.done if update is not None else False
    await service.set_done(session, task_id, done)

    label = DONE_LABEL if done else NOT_DONE_LABEL
    return MessageResponse(message=f"Status task {task_id} berhasil diubah: {label}")


@router.delete("/{id}", response_model=MessageResponse)
async def delete_task(
    id: str,
    session: AsyncSession = Depends(get_session),
):
    """Delete a task and its relationships."""
    await service.delete_task(session, parse_task_id(id))
    return MessageResponse(message="Task deleted successfully")
