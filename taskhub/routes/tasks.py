"""
Task routes.

Reads are public. Create requires a bearer token; update and delete
additionally require the caller to own the task.
"""

from fastapi import APIRouter, Depends, status
from typing import Any, Dict
from loguru import logger

from taskhub.exceptions import APIError, InternalError
from taskhub.middleware.auth_middleware import get_current_user
from taskhub.middleware.validation import validate_body, validate_params, validate_query
from taskhub.models.task import TaskCreate, TaskIdParams, TaskQuery, TaskUpdate
from taskhub.services.task_service import task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("")
async def get_tasks(query: TaskQuery = Depends(validate_query(TaskQuery))):
    """
    List tasks, newest first.

    Args:
        query: Optional completed/priority filters and page/limit

    Returns:
        A page of tasks with pagination metadata
    """
    try:
        result = await task_service.list_tasks(query)

        return {
            "success": True,
            "data": result
        }

    except APIError:
        raise
    except Exception as e:
        logger.error(f"Failed to list tasks: {e}")
        raise InternalError("Error fetching tasks", detail=str(e))


@router.get("/{id}")
async def get_task_by_id(params: TaskIdParams = Depends(validate_params(TaskIdParams))):
    try:
        task = await task_service.get_task(params.id)

        return {
            "success": True,
            "data": task
        }

    except APIError:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch task {params.id}: {e}")
        raise InternalError("Error fetching task", detail=str(e))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate = Depends(validate_body(TaskCreate)),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Create a task owned by the authenticated user.

    Args:
        data: Validated task fields
        current_user: Authenticated user

    Returns:
        The created task
    """
    try:
        task = await task_service.create_task(data, owner_id=str(current_user["_id"]))

        return {
            "success": True,
            "message": "Task created successfully",
            "data": task
        }

    except APIError:
        raise
    except Exception as e:
        logger.error(f"Task creation failed: {e}")
        raise InternalError("Error creating task", detail=str(e))


@router.put("/{id}")
async def update_task(
    params: TaskIdParams = Depends(validate_params(TaskIdParams)),
    data: TaskUpdate = Depends(validate_body(TaskUpdate)),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Partially update a task owned by the authenticated user.

    Args:
        params: Task id
        data: Fields to change
        current_user: Authenticated user

    Returns:
        The updated task

    Raises:
        NotFoundOrForbidden: If the task does not exist or is not the caller's
    """
    try:
        task = await task_service.update_task(
            params.id, data, owner_id=str(current_user["_id"])
        )

        return {
            "success": True,
            "message": "Task updated successfully",
            "data": task
        }

    except APIError:
        raise
    except Exception as e:
        logger.error(f"Task update failed for {params.id}: {e}")
        raise InternalError("Error updating task", detail=str(e))


@router.delete("/{id}")
async def delete_task(
    params: TaskIdParams = Depends(validate_params(TaskIdParams)),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    try:
        await task_service.delete_task(params.id, owner_id=str(current_user["_id"]))

        return {
            "success": True,
            "message": "Task deleted successfully"
        }

    except APIError:
        raise
    except Exception as e:
        logger.error(f"Task deletion failed for {params.id}: {e}")
        raise InternalError("Error deleting task", detail=str(e))
