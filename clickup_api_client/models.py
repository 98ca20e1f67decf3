"""Task DTOs used by the tasks service."""

from .serialization import ClickUpModel, OptionalEpochMillis

# ClickUp's "Get Tasks" returns at most 100 tasks per page
TASKS_PAGE_SIZE = 100


class TaskStatus(ClickUpModel):
    status: str
    color: str | None = None
    type: str | None = None
    orderindex: int | None = None


class TaskUser(ClickUpModel):
    id: int
    username: str | None = None
    email: str | None = None


class Task(ClickUpModel):
    id: str
    name: str
    custom_id: str | None = None
    text_content: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    creator: TaskUser | None = None
    assignees: list[TaskUser] = []
    parent: str | None = None
    priority: dict | None = None
    url: str | None = None
    date_created: OptionalEpochMillis = None
    date_updated: OptionalEpochMillis = None
    date_closed: OptionalEpochMillis = None
    date_done: OptionalEpochMillis = None
    due_date: OptionalEpochMillis = None
    start_date: OptionalEpochMillis = None
    archived: bool | None = None


class GetTasksResponse(ClickUpModel):
    tasks: list[Task] = []
    last_page: bool | None = None


class CreateTaskRequest(ClickUpModel):
    name: str
    description: str | None = None
    markdown_description: str | None = None
    assignees: list[int] | None = None
    tags: list[str] | None = None
    status: str | None = None
    priority: int | None = None
    due_date: OptionalEpochMillis = None
    due_date_time: bool | None = None
    start_date: OptionalEpochMillis = None
    start_date_time: bool | None = None
    notify_all: bool | None = None
    parent: str | None = None


class UpdateTaskRequest(ClickUpModel):
    name: str | None = None
    description: str | None = None
    status: str | None = None
    priority: int | None = None
    due_date: OptionalEpochMillis = None
    start_date: OptionalEpochMillis = None
    archived: bool | None = None
