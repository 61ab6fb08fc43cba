from typing import Dict, Optional, Set

DRAFT = "draft"
SENT = "sent"
VIEWED = "viewed"
SIGNED = "signed"
PAID = "paid"
EXPIRED = "expired"
CANCELLED = "cancelled"

PROPOSAL_STATUSES = (DRAFT, SENT, VIEWED, SIGNED, PAID, EXPIRED, CANCELLED)

# Explicit allowed state transitions
ALLOWED_PROPOSAL_TRANSITIONS: Dict[str, Set[str]] = {
    DRAFT: {SENT, CANCELLED},
    SENT: {VIEWED, SIGNED, EXPIRED, CANCELLED},
    VIEWED: {SIGNED, EXPIRED, CANCELLED},
    SIGNED: {PAID},
    PAID: set(),
    EXPIRED: {DRAFT},  # reopened for editing and resending
    CANCELLED: set(),
}

# Audit event recorded when a proposal enters the status
TRANSITION_EVENTS: Dict[str, str] = {
    SENT: "PUBLISHED",
    SIGNED: "SIGNED",
    PAID: "PAID",
}

# Timestamp column stamped when a proposal enters the status
TRANSITION_TIMESTAMPS: Dict[str, str] = {
    SENT: "sent_at",
    VIEWED: "viewed_at",
    SIGNED: "signed_at",
    PAID: "paid_at",
}


class IllegalTransition(ValueError):
    pass


def can_transition(from_status: str, to_status: str) -> bool:
    return to_status in ALLOWED_PROPOSAL_TRANSITIONS.get(from_status, set())


def assert_proposal_transition(*, from_status: str, to_status: str) -> None:
    """
    Guards proposal lifecycle transitions.
    Single source of truth for status changes.
    """
    if to_status not in PROPOSAL_STATUSES:
        raise IllegalTransition(f"Unknown proposal status: {to_status}")

    if not can_transition(from_status, to_status):
        raise IllegalTransition(
            f"Illegal proposal transition: {from_status} → {to_status}"
        )


def transition_event(to_status: str) -> Optional[str]:
    return TRANSITION_EVENTS.get(to_status)
