"""
Generic approval workflow shared by leave requests, absence justifications and complaints.

Each entity is described by a WorkflowConfig: its transition table, the free-text field
that carries the reviewer's note, which statuses stamp the reviewer and time, and hooks
run when a status is entered (the leave-balance deduction is one of them).
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, FrozenSet, Mapping, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.schemas import ActorContext
from hr_portal.core.datetime_utils import utcnow
from hr_portal.core.exceptions import StateError, ValidationError

logger = logging.getLogger(__name__)

TransitionHook = Callable[[AsyncSession, Any, ActorContext], Awaitable[None]]

PENDING = "pending"
DEFAULT_STATE_MESSAGE = "Can only {verb} pending {plural}"


@dataclass(frozen=True)
class WorkflowConfig:
    model: Any
    label: str
    plural: str
    # status -> statuses reachable from it; a status with no targets is terminal
    transitions: Mapping[str, FrozenSet[str]]
    initial_status: str = PENDING
    note_field: str = "rejection_reason"
    note_required_for: FrozenSet[str] = frozenset()
    actor_field: str = "processed_by"
    actor_relationship: str = "processor"
    timestamp_field: str = "processed_at"
    stamp_on: FrozenSet[str] = frozenset()
    on_enter: Mapping[str, Tuple[TransitionHook, ...]] = field(default_factory=dict)
    attachment_field: Optional[str] = None
    delete_verb: str = "delete"
    # action value -> message template; {verb}, {plural} and {status} are substituted
    state_messages: Mapping[str, str] = field(default_factory=dict)

    @property
    def statuses(self) -> FrozenSet[str]:
        reachable = {s for targets in self.transitions.values() for s in targets}
        return frozenset(self.transitions) | frozenset(reachable)

    @property
    def open_statuses(self) -> FrozenSet[str]:
        return frozenset(s for s, targets in self.transitions.items() if targets)

    def is_terminal(self, status: str) -> bool:
        return not self.transitions.get(status)

    def state_message(self, action: str, verb: str, status: str) -> str:
        template = self.state_messages.get(action, DEFAULT_STATE_MESSAGE)
        return template.format(verb=verb, plural=self.plural, status=status)


async def apply_transition(
    db: AsyncSession,
    workflow: WorkflowConfig,
    record: Any,
    target: str,
    actor: ActorContext,
    note: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Any:
    """
    Move record to target status. Does not commit: the caller commits the record together
    with whatever the hooks changed, so the transition and its side effects are one unit.
    """
    current = record.status
    if target not in workflow.statuses:
        raise ValidationError(
            f"Invalid status '{target}'",
            {"status": [f"The status must be one of: {', '.join(sorted(workflow.statuses - {workflow.initial_status}))}."]},
        )
    if workflow.is_terminal(current):
        raise StateError(workflow.state_message("update_status", "update", current))
    if target not in workflow.transitions[current]:
        raise StateError(f"Cannot move {workflow.label} from {current} to {target}")

    note = note.strip() if note and note.strip() else None
    if target in workflow.note_required_for and note is None:
        raise ValidationError(
            f"{workflow.note_field} is required when status is {target}",
            {workflow.note_field: [f"The {workflow.note_field} field is required when status is {target}."]},
        )

    for hook in workflow.on_enter.get(target, ()):
        await hook(db, record, actor)

    record.status = target
    setattr(record, workflow.note_field, note)
    if target in workflow.stamp_on:
        setattr(record, workflow.actor_field, actor.user_id)
        setattr(record, workflow.timestamp_field, now or utcnow())

    logger.info(
        "%s %s: %s -> %s by user %s", workflow.label, record.id, current, target, actor.user_id
    )
    return record
