from typing import Dict, Optional
from proposal_builder.models.base import utc_now
from proposal_builder.models.proposal import Proposal
from proposal_builder.domain.lifecycle.proposal import (
    TRANSITION_TIMESTAMPS,
    assert_proposal_transition,
    transition_event,
)
from proposal_builder.utils.audit import record_proposal_event
from proposal_builder.utils.transaction import transactional


def change_status(
    *,
    proposal: Proposal,
    to_status: str,
    actor_email: Optional[str],
) -> Dict[str, str]:
    """
    Move a proposal along its lifecycle.

    Responsibilities:
    - lifecycle transition enforcement
    - status timestamp stamping
    - audit logging for sent / signed / paid
    """
    if proposal.is_template:
        raise ValueError("Templates have no lifecycle")

    from_status = proposal.status
    assert_proposal_transition(from_status=from_status, to_status=to_status)

    with transactional():
        proposal.status = to_status

        timestamp_field = TRANSITION_TIMESTAMPS.get(to_status)
        if timestamp_field:
            setattr(proposal, timestamp_field, utc_now())

        event_type = transition_event(to_status)
        if event_type:
            record_proposal_event(
                proposal_id=proposal.id,
                event_type=event_type,
                event_data={"from_status": from_status, "to_status": to_status},
                user_email=actor_email,
            )

    return {
        "proposal_id": proposal.id,
        "status": proposal.status,
    }
