import math
from typing import Dict, Any
from bson import ObjectId
from loguru import logger

from taskhub.exceptions import NotFoundOrForbidden
from taskhub.models.task import TaskCreate, TaskQuery, TaskResponse, TaskUpdate
from taskhub.services.database import TaskDB, to_object_id


def owned_by(task_id: str, owner_id: str) -> Dict[str, Any]:
    """
    Build the store filter that matches a task only for its owner.

    Update and delete both go through this filter, so a task that exists but
    belongs to another user is indistinguishable from a missing one.
    """
    return {"_id": to_object_id(task_id), "created_by": to_object_id(owner_id)}


class TaskService:

    async def list_tasks(self, query: TaskQuery) -> Dict[str, Any]:
        filter_dict: Dict[str, Any] = {}

        if query.completed is not None:
            filter_dict["completed"] = query.completed
        if query.priority is not None:
            filter_dict["priority"] = query.priority.value

        skip = (query.page - 1) * query.limit

        tasks = await TaskDB.find_tasks(filter_dict, skip=skip, limit=query.limit)
        total = await TaskDB.count_tasks(filter_dict)

        return {
            "tasks": [TaskResponse.from_document(task) for task in tasks],
            "pagination": {
                "current": query.page,
                "total": math.ceil(total / query.limit),
                "count": len(tasks),
                "totalItems": total
            }
        }

    async def get_task(self, task_id: str) -> Dict[str, Any]:
        task = await TaskDB.get_task(task_id)

        if not task:
            raise NotFoundOrForbidden("Task not found")

        return TaskResponse.from_document(task)

    async def create_task(self, data: TaskCreate, owner_id: str) -> Dict[str, Any]:
        task_doc = {
            "title": data.title,
            "description": data.description,
            "completed": data.completed,
            "priority": data.priority.value,
            "due_date": data.due_date,
            "created_by": ObjectId(owner_id)
        }

        task = await TaskDB.insert_task(task_doc)
        logger.info(f"Task {task['_id']} created by user {owner_id}")

        return TaskResponse.from_document(task)

    async def update_task(
        self,
        task_id: str,
        data: TaskUpdate,
        owner_id: str
    ) -> Dict[str, Any]:
        changes = data.model_dump(exclude_unset=True)
        if "priority" in changes:
            changes["priority"] = changes["priority"].value

        task = await TaskDB.update_task(owned_by(task_id, owner_id), changes)

        if not task:
            raise NotFoundOrForbidden(
                "Task not found or you do not have permission to update it"
            )

        logger.info(f"Task {task_id} updated by user {owner_id}: {sorted(changes)}")
        return TaskResponse.from_document(task)

    async def delete_task(self, task_id: str, owner_id: str) -> None:
        task = await TaskDB.delete_task(owned_by(task_id, owner_id))

        if not task:
            raise NotFoundOrForbidden(
                "Task not found or you do not have permission to delete it"
            )

        logger.info(f"Task {task_id} deleted by user {owner_id}")


task_service = TaskService()
