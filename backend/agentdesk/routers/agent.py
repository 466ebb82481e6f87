from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from agentdesk.agent.confirm import ConfirmationCoordinator, get_coordinator
from agentdesk.agent.errors import InvalidStateError, NotFoundError
from agentdesk.services.record_store import RecordStore

router = APIRouter(prefix="/agent", tags=["agent"])


class AgentConfirmRequest(BaseModel):
    event_id: int = Field(gt=0)
    approved: bool


class ProposeActionRequest(BaseModel):
    workspace_id: int = Field(gt=0)
    agent: str = Field(min_length=1)
    action: str = Field(min_length=1)
    input: dict[str, Any] = Field(default_factory=dict)


@router.post("/events")
async def propose_action(
    body: ProposeActionRequest,
    coordinator: ConfirmationCoordinator = Depends(get_coordinator),
):
    async with coordinator.session_factory() as session:
        async with session.begin():
            event = await RecordStore(session).insert_agent_event(
                workspace_id=body.workspace_id,
                agent=body.agent,
                action=body.action,
                input=body.input,
            )
    return event.to_dict()


@router.get("/events")
async def list_events(
    workspace_id: int,
    status: str | None = None,
    coordinator: ConfirmationCoordinator = Depends(get_coordinator),
):
    async with coordinator.session_factory() as session:
        events = await RecordStore(session).list_agent_events(workspace_id, status=status)
    return [e.to_dict() for e in events]


@router.get("/actions")
async def list_actions(coordinator: ConfirmationCoordinator = Depends(get_coordinator)):
    """Actions with a dedicated executor; anything else runs the default."""
    return coordinator.registry.describe_actions()


@router.get("/events/{event_id}")
async def get_event(
    event_id: int,
    coordinator: ConfirmationCoordinator = Depends(get_coordinator),
):
    async with coordinator.session_factory() as session:
        event = await RecordStore(session).get_agent_event(event_id)
    if event is None:
        raise HTTPException(404, f"Agent event with id {event_id} not found")
    return event.to_dict()


@router.post("/confirm")
async def confirm(
    body: AgentConfirmRequest,
    coordinator: ConfirmationCoordinator = Depends(get_coordinator),
):
    try:
        response = await coordinator.confirm(body.event_id, body.approved)
    except NotFoundError as e:
        raise HTTPException(404, str(e))
    except InvalidStateError as e:
        raise HTTPException(409, str(e))
    return response.to_dict()
