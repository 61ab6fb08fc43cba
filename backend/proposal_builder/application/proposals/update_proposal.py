from typing import Any, Dict, Optional
from proposal_builder.models.proposal import Proposal
from proposal_builder.utils.audit import EventType, record_proposal_event
from proposal_builder.utils.transaction import transactional


ALLOWED_UPDATE_FIELDS = (
    "title",
    "client_name",
    "client_email",
    "client_company",
    "custom_message",
    "currency",
)


def update_proposal(
    *,
    proposal: Proposal,
    actor_email: Optional[str],
    data: Dict[str, Any],
) -> Proposal:
    """
    Update mutable metadata on a proposal.

    Design rules:
    - Only whitelisted fields are mutable (status has its own endpoint)
    - No silent no-op updates
    """
    changed_fields: list[str] = []

    with transactional():
        for field in ALLOWED_UPDATE_FIELDS:
            if field in data and getattr(proposal, field) != data[field]:
                setattr(proposal, field, data[field])
                changed_fields.append(field)

        if not changed_fields:
            # Explicitly fail instead of silently succeeding
            raise ValueError("No valid fields provided for update")

        if not (proposal.title or "").strip():
            raise ValueError("Title cannot be empty")

        record_proposal_event(
            proposal_id=proposal.id,
            event_type=EventType.EDITED,
            event_data={"fields": changed_fields},
            user_email=actor_email,
        )

    return proposal
