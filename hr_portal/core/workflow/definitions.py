from hr_portal.core.enums import ComplaintStatus, RequestStatus
from hr_portal.core.models import AbsenceJustification, Complaint, LeaveRequest

from .engine import WorkflowConfig
from .ledger import deduct_on_approval

_PENDING = RequestStatus.PENDING.value
_APPROVED = RequestStatus.APPROVED.value
_REJECTED = RequestStatus.REJECTED.value

_REVIEW_TRANSITIONS = {
    _PENDING: frozenset({_APPROVED, _REJECTED}),
    _APPROVED: frozenset(),
    _REJECTED: frozenset(),
}


LEAVE_REQUEST_WORKFLOW = WorkflowConfig(
    model=LeaveRequest,
    label="leave request",
    plural="leave requests",
    transitions=_REVIEW_TRANSITIONS,
    note_field="rejection_reason",
    note_required_for=frozenset({_REJECTED}),
    stamp_on=frozenset({_APPROVED, _REJECTED}),
    on_enter={_APPROVED: (deduct_on_approval,)},
    delete_verb="cancel",
    state_messages={
        "delete": "Can only cancel leave requests with status pending. Current status: {status}",
    },
)


ABSENCE_JUSTIFICATION_WORKFLOW = WorkflowConfig(
    model=AbsenceJustification,
    label="absence justification",
    plural="absence justifications",
    transitions=_REVIEW_TRANSITIONS,
    note_field="rejection_reason",
    note_required_for=frozenset({_REJECTED}),
    stamp_on=frozenset({_APPROVED, _REJECTED}),
    attachment_field="document_path",
)


# in_review is optional: a pending complaint may be resolved or rejected directly
COMPLAINT_WORKFLOW = WorkflowConfig(
    model=Complaint,
    label="complaint",
    plural="complaints",
    transitions={
        ComplaintStatus.PENDING.value: frozenset(
            {ComplaintStatus.IN_REVIEW.value, ComplaintStatus.RESOLVED.value, ComplaintStatus.REJECTED.value}
        ),
        ComplaintStatus.IN_REVIEW.value: frozenset(
            {ComplaintStatus.RESOLVED.value, ComplaintStatus.REJECTED.value}
        ),
        ComplaintStatus.RESOLVED.value: frozenset(),
        ComplaintStatus.REJECTED.value: frozenset(),
    },
    note_field="resolution_details",
    note_required_for=frozenset({ComplaintStatus.RESOLVED.value, ComplaintStatus.REJECTED.value}),
    actor_field="handled_by",
    actor_relationship="handler",
    timestamp_field="resolved_at",
    stamp_on=frozenset({ComplaintStatus.RESOLVED.value, ComplaintStatus.REJECTED.value}),
    attachment_field="attachment_path",
    state_messages={
        "update_status": "Can only update pending or in-review complaints",
    },
)
