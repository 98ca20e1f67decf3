"""Tasks endpoints on top of ApiConnection."""

import logging
from typing import AsyncIterator

from .connection import ApiConnection
from .models import TASKS_PAGE_SIZE, CreateTaskRequest, GetTasksResponse, Task, UpdateTaskRequest
from .pagination import Page, iterate_pages

logger = logging.getLogger(__name__)


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


class TasksService:
    def __init__(self, connection: ApiConnection):
        self._connection = connection

    async def get_task(self, task_id: str) -> Task:
        if not task_id:
            raise ValueError("task_id is required")
        return await self._connection.get(f"task/{task_id}", Task)

    async def get_tasks(
        self,
        list_id: str,
        page: int = 0,
        include_closed: bool | None = None,
        archived: bool | None = None,
        subtasks: bool | None = None,
    ) -> Page[Task]:
        """Fetch one page of tasks in a list.

        ClickUp only reports ``last_page``, so the page has no total count.
        """
        if not list_id:
            raise ValueError("list_id is required")
        params = {"page": page}
        if include_closed is not None:
            params["include_closed"] = _bool_param(include_closed)
        if archived is not None:
            params["archived"] = _bool_param(archived)
        if subtasks is not None:
            params["subtasks"] = _bool_param(subtasks)

        logger.info("Getting tasks for list %s, page %d", list_id, page)
        response = await self._connection.get(f"list/{list_id}/task", GetTasksResponse, params=params)
        if response is None:
            logger.warning("Empty response getting tasks for list %s, returning empty page", list_id)
            return Page.empty(page, TASKS_PAGE_SIZE)

        # Older responses omit last_page; a short page is then the last one
        if response.last_page is None:
            has_next_page = len(response.tasks) >= TASKS_PAGE_SIZE
        else:
            has_next_page = not response.last_page
        return Page.from_next_page_flag(
            response.tasks,
            page,
            has_next_page=has_next_page,
            page_size=TASKS_PAGE_SIZE,
        )

    def iter_tasks(self, list_id: str, start_page: int = 0, **filters) -> AsyncIterator[Task]:
        """Stream every task in a list, page by page."""

        async def fetch(page: int) -> Page[Task]:
            return await self.get_tasks(list_id, page=page, **filters)

        return iterate_pages(fetch, start_page)

    async def create_task(self, list_id: str, request: CreateTaskRequest) -> Task:
        if not list_id:
            raise ValueError("list_id is required")
        return await self._connection.post(f"list/{list_id}/task", request, Task)

    async def update_task(self, task_id: str, request: UpdateTaskRequest) -> Task:
        if not task_id:
            raise ValueError("task_id is required")
        return await self._connection.put(f"task/{task_id}", request, Task)

    async def delete_task(self, task_id: str) -> None:
        if not task_id:
            raise ValueError("task_id is required")
        await self._connection.delete(f"task/{task_id}", expect_body=False)
