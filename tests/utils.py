"""
Test utility functions and assertions.

This module provides helper functions for common testing patterns:
- Response assertions (status codes, error messages)
- Database query helpers (counting, existence checks)
- Listing helpers
"""

from typing import Optional, Type

from httpx import AsyncClient, Response
from sqlalchemy import func, select
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession


# =============================================================================
# Response assertion helpers
# =============================================================================


def assert_status_code(response: Response, expected: int):
    """
    Assert that the response has the expected status code.

    Args:
        response: The HTTP response
        expected: Expected status code

    Raises:
        AssertionError: If status code doesn't match
    """
    assert response.status_code == expected, (
        f"Expected status code {expected}, got {response.status_code}. "
        f"Response body: {response.text}"
    )


def assert_error(response: Response, expected_status: int, message: Optional[str] = None):
    """
    Assert an error response of the form {"error": "<message>"}.

    Args:
        response: The HTTP response
        expected_status: Expected status code
        message: Expected error message, if it should be checked
    """
    assert_status_code(response, expected_status)
    data = response.json()
    assert set(data) == {"error"}, f"Unexpected error body: {data}"
    assert isinstance(data["error"], str), "'error' should be a string"
    if message is not None:
        assert data["error"] == message, (
            f"Expected error '{message}', got '{data['error']}'"
        )


# =============================================================================
# Database query helpers
# =============================================================================


async def count_records(session: AsyncSession, model_class: Type[SQLModel]) -> int:
    """
    Count the number of records for a given model.

    Args:
        session: Database session
        model_class: SQLModel class to count

    Returns:
        Number of records
    """
    result = await session.execute(select(func.count()).select_from(model_class))
    return result.scalar_one()


async def get_record_by_id(
    session: AsyncSession, model_class: Type[SQLModel], record_id: int
) -> Optional[SQLModel]:
    """
    Get a record by its ID, reloading it if the session already holds it.

    Args:
        session: Database session
        model_class: SQLModel class
        record_id: ID of the record

    Returns:
        The record if found, None otherwise
    """
    result = await session.execute(
        select(model_class)
        .where(model_class.id == record_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def record_exists(
    session: AsyncSession, model_class: Type[SQLModel], record_id: int
) -> bool:
    """Check if a record exists by its ID."""
    record = await get_record_by_id(session, model_class, record_id)
    return record is not None


# =============================================================================
# Listing helpers
# =============================================================================


async def list_tasks_by_id(client: AsyncClient) -> dict[int, dict]:
    """
    Fetch GET /tasks and index the result by task id.

    Args:
        client: Test client

    Returns:
        Mapping of task id to task object
    """
    response = await client.get("/tasks")
    assert_status_code(response, 200)
    return {task["id"]: task for task in response.json()}


async def listed_ids(client: AsyncClient) -> list[int]:
    """Task ids in the order GET /tasks returns them."""
    response = await client.get("/tasks")
    assert_status_code(response, 200)
    return [task["id"] for task in response.json()]
