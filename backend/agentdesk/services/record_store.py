from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agentdesk.models import (
    AgentEvent,
    AgentEventStatus,
    Task,
    TaskPriority,
    TaskStatus,
    User,
    Workspace,
)


class RecordStore:
    """Point reads and writes for agent events and tasks within one session.

    The caller owns the transaction; nothing here commits.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_agent_event(
        self, event_id: int, *, refresh: bool = False
    ) -> AgentEvent | None:
        return await self.session.get(AgentEvent, event_id, populate_existing=refresh)

    async def update_agent_event(
        self,
        event_id: int,
        *,
        status: str,
        output: dict[str, Any] | None,
        expected_status: str | None = None,
    ) -> AgentEvent | None:
        """Write status/output and return the refreshed event.

        With ``expected_status`` the write only applies while the row still
        carries that status. Returns None when no row matched.
        """
        stmt = (
            update(AgentEvent)
            .where(AgentEvent.id == event_id)
            .values(status=status, output=output)
        )
        if expected_status is not None:
            stmt = stmt.where(AgentEvent.status == expected_status)

        result = await self.session.execute(
            stmt.execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        return await self.session.get(AgentEvent, event_id, populate_existing=True)

    async def insert_task(
        self,
        *,
        workspace_id: int,
        title: str,
        description: str | None = None,
        priority: str = TaskPriority.MED.value,
        due_at: datetime | None = None,
        status: str = TaskStatus.TODO.value,
    ) -> Task:
        task = Task(
            workspace_id=workspace_id,
            title=title,
            description=description,
            priority=priority,
            due_at=due_at,
            status=status,
        )
        # A failed insert only unwinds its own savepoint
        async with self.session.begin_nested():
            self.session.add(task)
            await self.session.flush()
        return task

    async def list_tasks(self, workspace_id: int) -> list[Task]:
        result = await self.session.execute(
            select(Task).where(Task.workspace_id == workspace_id).order_by(Task.id)
        )
        return list(result.scalars().all())

    async def insert_agent_event(
        self,
        *,
        workspace_id: int,
        agent: str,
        action: str,
        input: dict[str, Any],
        status: str = AgentEventStatus.AWAITING_CONFIRMATION.value,
    ) -> AgentEvent:
        agent_event = AgentEvent(
            workspace_id=workspace_id,
            agent=agent,
            action=action,
            input=input,
            status=status,
        )
        self.session.add(agent_event)
        await self.session.flush()
        return agent_event

    async def list_agent_events(
        self, workspace_id: int, status: str | None = None
    ) -> list[AgentEvent]:
        stmt = select(AgentEvent).where(AgentEvent.workspace_id == workspace_id)
        if status is not None:
            stmt = stmt.where(AgentEvent.status == status)
        result = await self.session.execute(stmt.order_by(AgentEvent.id))
        return list(result.scalars().all())

    async def insert_user(self, *, email: str, display_name: str, **fields: Any) -> User:
        user = User(email=email, display_name=display_name, **fields)
        self.session.add(user)
        await self.session.flush()
        return user

    async def insert_workspace(
        self, *, owner_id: int, name: str, settings: dict | None = None
    ) -> Workspace:
        workspace = Workspace(owner_id=owner_id, name=name, settings=settings or {})
        self.session.add(workspace)
        await self.session.flush()
        return workspace
