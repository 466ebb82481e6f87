from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Coroutine

from sqlalchemy.exc import SQLAlchemyError

from agentdesk.constants import (
    CREATE_TASK_ACTION,
    DEFAULT_ACTION_MESSAGE,
    SQLITE_MAX_INT,
    SQLITE_MIN_INT,
    TASK_CREATED_LABEL,
    TASK_CREATED_MESSAGE,
)
from agentdesk.models import TaskPriority
from agentdesk.services.record_store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    success: bool
    message: str | None = None
    error: str | None = None
    created_task_id: int | None = None
    # Merged into AgentEvent.output when the action succeeds
    output: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"success": self.success}
        if self.created_task_id is not None:
            data["created_task_id"] = self.created_task_id
        if self.message is not None:
            data["message"] = self.message
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def failure(cls, error: str) -> ExecutionResult:
        return cls(success=False, error=error)


ActionHandler = Callable[
    [str, dict, RecordStore], Coroutine[Any, Any, ExecutionResult]
]


@dataclass
class ActionDefinition:
    action: str
    description: str
    handler: ActionHandler


async def execute_default(action: str, payload: dict, store: RecordStore) -> ExecutionResult:
    """Placeholder for action kinds without a dedicated executor."""
    return ExecutionResult(
        success=True,
        message=DEFAULT_ACTION_MESSAGE.format(action),
        output={"executed_action": action},
    )


def _parse_due_at(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid due_at: {value!r}")
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"Invalid due_at: {value!r}") from None


def _parse_priority(value: Any) -> str:
    try:
        return TaskPriority(value).value
    except ValueError:
        return TaskPriority.MED.value


async def execute_create_task(action: str, payload: dict, store: RecordStore) -> ExecutionResult:
    try:
        workspace_id = payload.get("workspace_id")
        if isinstance(workspace_id, bool) or not isinstance(workspace_id, int):
            raise ValueError("workspace_id is required and must be an integer")
        if not SQLITE_MIN_INT <= workspace_id <= SQLITE_MAX_INT:
            raise ValueError("workspace_id is out of range")

        title = payload.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValueError("title is required")

        description = payload.get("description") or None
        if description is not None and not isinstance(description, str):
            raise ValueError("description must be a string")

        task = await store.insert_task(
            workspace_id=workspace_id,
            title=title,
            description=description,
            priority=_parse_priority(payload.get("priority")),
            due_at=_parse_due_at(payload.get("due_at")),
        )
    except ValueError as e:
        return ExecutionResult.failure(str(e))
    except SQLAlchemyError as e:
        logger.warning("Task creation failed: %s", e)
        return ExecutionResult.failure(str(getattr(e, "orig", None) or e))

    return ExecutionResult(
        success=True,
        created_task_id=task.id,
        message=TASK_CREATED_MESSAGE,
        output={"executed_action": TASK_CREATED_LABEL, "task_id": task.id},
    )


class ActionExecutorRegistry:
    """Maps an action name to the coroutine that carries it out.

    Dispatch is an exact match on the action name; anything unregistered
    goes to the default handler.
    """

    def __init__(self, default: ActionHandler = execute_default):
        self._actions: dict[str, ActionDefinition] = {}
        self._default = default

    def register(
        self,
        action: str,
        handler: ActionHandler,
        description: str = "",
    ) -> None:
        self._actions[action] = ActionDefinition(
            action=action,
            description=description,
            handler=handler,
        )

    def set_default(self, handler: ActionHandler) -> None:
        self._default = handler

    def get(self, action: str) -> ActionHandler:
        definition = self._actions.get(action)
        return definition.handler if definition else self._default

    async def execute(self, action: str, payload: dict, store: RecordStore) -> ExecutionResult:
        """Run the handler for ``action``. Expected failures come back as data."""
        handler = self.get(action)
        result = await handler(action, payload, store)
        if not result.success:
            logger.info("Action '%s' failed: %s", action, result.error)
        return result

    def list_actions(self) -> list[str]:
        return list(self._actions.keys())

    def describe_actions(self) -> list[dict]:
        """Return registered actions with their descriptions."""
        return [
            {"action": d.action, "description": d.description}
            for d in self._actions.values()
        ]


def build_default_registry() -> ActionExecutorRegistry:
    registry = ActionExecutorRegistry()
    registry.register(
        CREATE_TASK_ACTION,
        execute_create_task,
        description="Create a task in the proposing workspace",
    )
    return registry
