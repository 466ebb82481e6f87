"""Confirmation of agent-proposed actions.

An agent proposes an action as an AgentEvent in ``awaiting_confirmation``.
A human then approves or rejects it; approval runs the action through the
executor registry. Either way the event lands in exactly one terminal status
(``executed`` or ``error``) and its ``output`` records the decision.

The whole confirmation is one transaction. The terminal write only applies
while the event is still awaiting confirmation, so when two confirmations
race the loser is rolled back (its side effects included) and gets an
InvalidStateError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agentdesk.agent.errors import ConfirmationError, InvalidStateError, NotFoundError
from agentdesk.agent.executors import ActionExecutorRegistry, build_default_registry
from agentdesk.constants import REJECTION_REASON
from agentdesk.database import async_session
from agentdesk.models import AgentEvent, AgentEventStatus
from agentdesk.services.record_store import RecordStore

logger = logging.getLogger(__name__)

AWAITING = AgentEventStatus.AWAITING_CONFIRMATION.value


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class AgentConfirmResponse:
    agent_event: AgentEvent
    execution_result: dict | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"agent_event": self.agent_event.to_dict()}
        if self.execution_result is not None:
            data["execution_result"] = self.execution_result
        return data


class ConfirmationCoordinator:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = async_session,
        registry: ActionExecutorRegistry | None = None,
    ):
        self.session_factory = session_factory
        self.registry = registry or build_default_registry()

    async def confirm(self, event_id: int, approved: bool) -> AgentConfirmResponse:
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    return await self._confirm(RecordStore(session), event_id, approved)
        except ConfirmationError as e:
            logger.warning("Agent confirmation failed: %s", e)
            raise
        except Exception:
            logger.exception("Agent confirmation of event %s failed", event_id)
            raise

    async def _confirm(
        self, store: RecordStore, event_id: int, approved: bool
    ) -> AgentConfirmResponse:
        event = await store.get_agent_event(event_id)
        if event is None:
            raise NotFoundError(event_id)
        if event.status != AWAITING:
            raise InvalidStateError(event_id, event.status)

        if not approved:
            updated = await self._finalize(
                store,
                event_id,
                status=AgentEventStatus.ERROR.value,
                output={
                    "rejected": True,
                    "rejected_at": _now_iso(),
                    "reason": REJECTION_REASON,
                },
            )
            logger.info("Agent event %s rejected", event_id)
            return AgentConfirmResponse(agent_event=updated)

        output_data: dict[str, Any] = {"approved": True, "approved_at": _now_iso()}
        payload = event.input if isinstance(event.input, dict) else {}
        result = await self.registry.execute(event.action, payload, store)

        if result.success:
            output_data.update(result.output)
            status = AgentEventStatus.EXECUTED.value
        else:
            output_data["execution_error"] = result.error
            status = AgentEventStatus.ERROR.value

        updated = await self._finalize(store, event_id, status=status, output=output_data)
        logger.info(
            "Agent event %s approved, action '%s' finished with status %s",
            event_id,
            event.action,
            status,
        )
        return AgentConfirmResponse(
            agent_event=updated, execution_result=result.to_dict()
        )

    async def _finalize(
        self, store: RecordStore, event_id: int, *, status: str, output: dict
    ) -> AgentEvent:
        updated = await store.update_agent_event(
            event_id, status=status, output=output, expected_status=AWAITING
        )
        if updated is None:
            # Another confirmation got there first; raising rolls back ours
            current = await store.get_agent_event(event_id, refresh=True)
            if current is None:
                raise NotFoundError(event_id)
            raise InvalidStateError(event_id, current.status)
        return updated


_default_coordinator: ConfirmationCoordinator | None = None


def get_coordinator() -> ConfirmationCoordinator:
    global _default_coordinator
    if _default_coordinator is None:
        _default_coordinator = ConfirmationCoordinator()
    return _default_coordinator


async def agent_confirm(event_id: int, approved: bool) -> AgentConfirmResponse:
    return await get_coordinator().confirm(event_id, approved)
