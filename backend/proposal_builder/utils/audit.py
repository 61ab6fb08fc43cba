from typing import Optional
from flask import Request
from proposal_builder.extensions import db
from proposal_builder.models.proposal_event import ProposalEvent


class EventType:
    """Audit trail event names."""
    CREATED = "CREATED"
    PUBLISHED = "PUBLISHED"
    VIEWED = "VIEWED"
    ACCEPTED = "ACCEPTED"
    SIGNED = "SIGNED"
    PAID = "PAID"
    EDITED = "EDITED"


def record_proposal_event(
    *,
    proposal_id: str,
    event_type: str,
    event_data: dict | None = None,
    user_email: Optional[str] = None,
    user_name: Optional[str] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> ProposalEvent:
    """
    Stage an audit event on the current session.
    The caller owns the transaction that commits it.
    """
    entry = ProposalEvent()

    entry.proposal_id = proposal_id
    entry.event_type = event_type
    entry.event_data = event_data or {}
    entry.user_email = user_email
    entry.user_name = user_name
    entry.ip_address = ip_address
    entry.user_agent = user_agent

    db.session.add(entry)
    return entry


def get_ip_address(request: Request) -> Optional[str]:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or request.remote_addr


def get_user_agent(request: Request) -> Optional[str]:
    return request.headers.get("User-Agent") or None
