"""Shared setup for agentdesk tests: a fresh database per test."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from agentdesk.agent.confirm import ConfirmationCoordinator
from agentdesk.agent.executors import ActionExecutorRegistry
from agentdesk.database import init_db, make_engine, make_session_factory
from agentdesk.models import AgentEvent, AgentEventStatus, Task
from agentdesk.services.record_store import RecordStore


@dataclass
class Harness:
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    coordinator: ConfirmationCoordinator

    async def create_workspace(self) -> int:
        async with self.session_factory() as session:
            async with session.begin():
                store = RecordStore(session)
                user = await store.insert_user(
                    email=f"{uuid.uuid4().hex[:8]}@example.com",
                    display_name="Test User",
                    timezone="UTC",
                    llm_provider="openai",
                    llm_model="gpt-4",
                )
                workspace = await store.insert_workspace(
                    owner_id=user.id, name="Test Workspace"
                )
            return workspace.id

    async def create_event(
        self,
        workspace_id: int,
        action: str = "create_task",
        input: dict | None = None,
        agent: str = "task_agent",
        status: str = AgentEventStatus.AWAITING_CONFIRMATION.value,
    ) -> int:
        async with self.session_factory() as session:
            async with session.begin():
                event = await RecordStore(session).insert_agent_event(
                    workspace_id=workspace_id,
                    agent=agent,
                    action=action,
                    input=input if input is not None else {},
                    status=status,
                )
            return event.id

    async def get_event(self, event_id: int) -> AgentEvent | None:
        async with self.session_factory() as session:
            return await RecordStore(session).get_agent_event(event_id)

    async def tasks(self, workspace_id: int) -> list[Task]:
        async with self.session_factory() as session:
            return await RecordStore(session).list_tasks(workspace_id)

    async def task_count(self) -> int:
        async with self.session_factory() as session:
            return await session.scalar(select(func.count()).select_from(Task))


@asynccontextmanager
async def harness(
    db_url: str, registry: ActionExecutorRegistry | None = None
) -> AsyncIterator[Harness]:
    engine = make_engine(db_url)
    await init_db(engine)
    session_factory = make_session_factory(engine)
    try:
        yield Harness(
            engine=engine,
            session_factory=session_factory,
            coordinator=ConfirmationCoordinator(session_factory, registry),
        )
    finally:
        await engine.dispose()
