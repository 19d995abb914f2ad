import logging
from typing import List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tasklist.exceptions import NotFoundException, OperationFailedException
from tasklist.models import Task
from tasklist.schemas.responses import TaskResponse
from tasklist.services.base import BaseCRUDService, atomic
from tasklist.services.relationship_service import RelationshipService

logger = logging.getLogger(__name__)


class TaskService(BaseCRUDService[Task]):
    """Task operations. Each public method is one transaction."""

    def __init__(self, relationships: Optional[RelationshipService] = None):
        super().__init__(Task)
        self.relationships = relationships or RelationshipService()

    async def list_with_relationships(self, session: AsyncSession) -> List[TaskResponse]:
        """Get every task in display order with its parent and child ids.

        Args:
            session: Database session

        Returns:
            Tasks ordered by position (ties by id), each with ``child_tasks``
            and ``parent_tasks`` filled in (empty lists when unlinked)
        """
        tasks = await self.get_all(session, order_by=["position", "id"])
        children, parents = await self.relationships.group_by_task(session)

        return [
            TaskResponse(
                **task.model_dump(),
                child_tasks=children.get(task.id, []),
                parent_tasks=parents.get(task.id, []),
            )
            for task in tasks
        ]

    async def create_task(
        self,
        session: AsyncSession,
        title: str,
        description: Optional[str] = None,
        parent_ids: Sequence[int] = (),
        child_ids: Sequence[int] = (),
    ) -> Task:
        """Insert a task at the end of the list and link it.

        The position is computed inside the INSERT statement, so concurrent
        creates cannot read the same maximum.

        Args:
            session: Database session
            title: Task title
            description: Optional description
            parent_ids: Existing tasks that become parents of the new task
            child_ids: Existing tasks that become children of the new task

        Returns:
            The created task

        Raises:
            IntegrityError: A linked id does not exist and foreign keys are
                enforced. Nothing is persisted in that case.
            BadRequestException: A linked id does not fit the id column.
        """
        task = Task(title=title, description=description)
        task.position = select(
            func.coalesce(func.max(Task.position) + 1, 0)
        ).scalar_subquery()

        async with atomic(session):
            session.add(task)
            await session.flush()

            pairs = [(parent_id, task.id) for parent_id in parent_ids]
            pairs += [(task.id, child_id) for child_id in child_ids]
            linked = await self.relationships.add_relationships(session, pairs)

        await session.refresh(task)
        logger.info(
            f"Created task {task.id} at position {task.position} "
            f"with {linked} relationship(s)"
        )
        return task

    async def update_position(
        self, session: AsyncSession, task_id: int, position: int
    ) -> bool:
        return await self.update_fields(session, task_id, position=position)

    async def reorder(self, session: AsyncSession, task_ids: Sequence[int]) -> None:
        """Give each task its index in ``task_ids`` as the new position.

        Ids that match no task are skipped.

        Raises:
            OperationFailedException: An update failed; no position changed
        """
        try:
            async with atomic(session):
                for index, task_id in enumerate(task_ids):
                    await self.update_position(session, task_id, index)
        except SQLAlchemyError as e:
            logger.warning(f"Reorder of {len(task_ids)} task(s) rolled back: {e}")
            raise OperationFailedException() from e

        logger.info(f"Reordered {len(task_ids)} task(s)")

    async def set_done(self, session: AsyncSession, task_id: int, done: bool) -> None:
        """Set the completion flag of a task.

        Raises:
            NotFoundException: If no task has this id
        """
        async with atomic(session):
            if not await self.update_fields(session, task_id, done=done):
                logger.warning(f"Cannot update task {task_id}: not found")
                raise NotFoundException()

        logger.info(f"Task {task_id} marked {'done' if done else 'not done'}")

    async def delete_task(self, session: AsyncSession, task_id: int) -> None:
        """Delete a task together with every relationship naming it.

        Raises:
            NotFoundException: If no task has this id
        """
        async with atomic(session):
            await self.relationships.remove_for_task(session, task_id)
            if not await self.delete_by_id(session, task_id):
                logger.warning(f"Cannot delete task {task_id}: not found")
                raise NotFoundException()

        logger.info(f"Deleted task {task_id}")
