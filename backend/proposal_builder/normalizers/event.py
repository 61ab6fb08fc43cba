# proposal_builder/normalizers/event.py
from __future__ import annotations

from typing import Dict, Any
from proposal_builder.models.proposal_event import ProposalEvent


def normalize_event(event: ProposalEvent) -> Dict[str, Any]:
    """Audit trail entry as returned by the events endpoint."""
    if not event:
        raise ValueError("ProposalEvent cannot be None")

    return {
        "id": event.id,
        "proposal_id": event.proposal_id,
        "event_type": event.event_type,
        "event_data": event.event_data or {},
        "user_email": event.user_email,
        "ip_address": event.ip_address,
        "created_at": event.created_at.isoformat(),
    }
