from collections import defaultdict
from typing import Dict, Iterable, List, Set, Tuple

from sqlalchemy import delete, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tasklist.exceptions import BadRequestException
from tasklist.models import TaskRelationship
from tasklist.services.base import is_storable_id


class RelationshipService:
    """Parent/child links between tasks."""

    async def add_relationships(
        self,
        session: AsyncSession,
        pairs: Iterable[Tuple[int, int]],
    ) -> int:
        """Stage one row per distinct (parent_id, child_id) pair.

        Nothing is committed here. An empty input is a no-op.

        Args:
            session: Database session
            pairs: (parent_id, child_id) tuples

        Returns:
            Number of rows staged

        Raises:
            BadRequestException: An id is outside the integer column range
        """
        unique_pairs = list(dict.fromkeys(pairs))
        if not unique_pairs:
            return 0

        # Such an id cannot name a stored task, enforced foreign keys or not
        if not all(is_storable_id(i) for pair in unique_pairs for i in pair):
            raise BadRequestException("Referenced task does not exist")

        session.add_all(
            TaskRelationship(parent_id=parent_id, child_id=child_id)
            for parent_id, child_id in unique_pairs
        )
        await session.flush()
        return len(unique_pairs)

    async def remove_for_task(self, session: AsyncSession, task_id: int) -> None:
        """Delete every link that names the task as parent or child."""
        if not is_storable_id(task_id):
            return

        await session.execute(
            delete(TaskRelationship).where(
                or_(
                    TaskRelationship.parent_id == task_id,
                    TaskRelationship.child_id == task_id,
                )
            )
        )

    async def group_by_task(
        self, session: AsyncSession
    ) -> Tuple[Dict[int, List[int]], Dict[int, List[int]]]:
        """Group all links by task.

        Returns:
            (children, parents): ``children[id]`` holds the ids the task is
            parent of, ``parents[id]`` the ids it is child of. Both sorted.
        """
        result = await session.execute(
            select(TaskRelationship.parent_id, TaskRelationship.child_id)
        )

        children: Dict[int, Set[int]] = defaultdict(set)
        parents: Dict[int, Set[int]] = defaultdict(set)
        for parent_id, child_id in result.all():
            children[parent_id].add(child_id)
            parents[child_id].add(parent_id)

        return (
            {task_id: sorted(ids) for task_id, ids in children.items()},
            {task_id: sorted(ids) for task_id, ids in parents.items()},
        )
