"""Role and ownership gate applied before every request operation. Pure: no I/O, no side effects."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hr_portal.auth.schemas import ActorContext
from hr_portal.core.exceptions import AuthorizationError, StateError

from .engine import WorkflowConfig

logger = logging.getLogger(__name__)


class Action(str, Enum):
    LIST = "list"
    CREATE = "create"
    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"
    UPDATE_STATUS = "update_status"


AUTHORIZATION = "authorization"
STATE = "state"


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    reason: Optional[str] = None
    kind: str = AUTHORIZATION


ALLOW = GateDecision(True)


def _deny(reason: str, kind: str = AUTHORIZATION) -> GateDecision:
    return GateDecision(False, reason, kind)


def can_act(
    actor: ActorContext,
    action: Action,
    workflow: WorkflowConfig,
    *,
    owner_employee_id: Optional[int] = None,
    status: Optional[str] = None,
) -> GateDecision:
    is_owner = actor.employee_id is not None and actor.employee_id == owner_employee_id

    if action == Action.LIST:
        if actor.is_staff or actor.employee_id is not None:
            return ALLOW
        return _deny("No employee profile is linked to this account")

    if action == Action.CREATE:
        if actor.employee_id is None:
            return _deny(f"An employee profile is required to submit a {workflow.label}")
        return ALLOW

    if action == Action.VIEW:
        if actor.is_staff or is_owner:
            return ALLOW
        return _deny(f"Unauthorized to view this {workflow.label}")

    if action in (Action.UPDATE, Action.DELETE):
        verb = "update" if action == Action.UPDATE else workflow.delete_verb
        if not is_owner:
            return _deny(f"Unauthorized to {verb} this {workflow.label}")
        if status != workflow.initial_status:
            return _deny(workflow.state_message(action.value, verb, status), STATE)
        return ALLOW

    if action == Action.UPDATE_STATUS:
        if not actor.is_staff:
            return _deny(f"Unauthorized to update {workflow.label} status")
        if status not in workflow.open_statuses:
            return _deny(workflow.state_message(action.value, "update", status), STATE)
        return ALLOW

    return _deny("Unsupported action")


def ensure_can_act(
    actor: ActorContext,
    action: Action,
    workflow: WorkflowConfig,
    *,
    owner_employee_id: Optional[int] = None,
    status: Optional[str] = None,
) -> None:
    decision = can_act(actor, action, workflow, owner_employee_id=owner_employee_id, status=status)
    if decision.allowed:
        return
    logger.warning(
        "Denied %s on %s for user %s: %s", action.value, workflow.label, actor.user_id, decision.reason
    )
    if decision.kind == STATE:
        raise StateError(decision.reason)
    raise AuthorizationError(decision.reason)
