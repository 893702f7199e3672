"""AssignmentRecord entity — one payin/payout routed to a candidate."""

from dataclasses import dataclass
from datetime import datetime

from payroute.domain.value_objects.enums import AssignmentStatus, CandidateKind


@dataclass
class AssignmentRecord:
    id: int | None
    kind: CandidateKind
    candidate_id: str
    status: AssignmentStatus
    amount: float
    assigned_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    failed_at: datetime | None = None
