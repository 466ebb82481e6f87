"""Confirmation and execution of agent-proposed actions."""

from agentdesk.agent.confirm import AgentConfirmResponse, ConfirmationCoordinator, agent_confirm
from agentdesk.agent.errors import ConfirmationError, InvalidStateError, NotFoundError
from agentdesk.agent.executors import ActionExecutorRegistry, ExecutionResult, build_default_registry

__all__ = [
    "AgentConfirmResponse",
    "ConfirmationCoordinator",
    "agent_confirm",
    "ConfirmationError",
    "InvalidStateError",
    "NotFoundError",
    "ActionExecutorRegistry",
    "ExecutionResult",
    "build_default_registry",
]
