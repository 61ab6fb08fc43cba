from typing import Any, Dict, Optional
from proposal_builder.extensions import db
from proposal_builder.models.proposal import Proposal
from proposal_builder.domain.document.engine import clone_block
from proposal_builder.domain.document.hydration import flatten, hydrate
from proposal_builder.utils.audit import EventType, record_proposal_event
from proposal_builder.utils.transaction import transactional
from .section_store import SqlSectionStore

DEFAULT_TITLE = "Untitled"
CREATE_FIELDS = ("client_name", "client_email", "client_company", "custom_message", "currency")


def _new_proposal(*, actor_id: str, data: Dict[str, Any], default_currency: str) -> Proposal:
    title: Optional[str] = data.get("title")
    if title is not None and not isinstance(title, str):
        raise ValueError("Title must be a string")

    proposal = Proposal()
    proposal.title = (title or "").strip() or DEFAULT_TITLE
    proposal.created_by = actor_id
    proposal.status = "draft"
    proposal.is_template = bool(data.get("is_template", False))
    proposal.currency = default_currency

    for field in CREATE_FIELDS:
        if data.get(field) is not None:
            setattr(proposal, field, data[field])

    return proposal


def create_proposal(
    *,
    actor_id: str,
    actor_email: Optional[str],
    data: Dict[str, Any],
    default_currency: str = "USD",
) -> Proposal:
    """
    Create a new proposal (or template) in DRAFT state with no sections.

    The editor seeds a default block the first time the empty document is
    loaded; nothing is stored for it until the first save.
    """
    proposal = _new_proposal(actor_id=actor_id, data=data, default_currency=default_currency)

    with transactional():
        db.session.add(proposal)
        db.session.flush()  # ensures proposal.id is available

        record_proposal_event(
            proposal_id=proposal.id,
            event_type=EventType.CREATED,
            event_data={
                "title": proposal.title,
                "is_template": proposal.is_template,
            },
            user_email=actor_email,
        )

    return proposal


def create_from_template(
    *,
    actor_id: str,
    actor_email: Optional[str],
    template: Proposal,
    data: Dict[str, Any],
    default_currency: str = "USD",
) -> Proposal:
    """
    Start a proposal from a template.

    Every template block is deep-copied with fresh ids, so later edits on
    either side never reach the other.
    """
    if not template.is_template:
        raise ValueError("Source proposal is not a template")

    data = dict(data)
    data.setdefault("title", template.title)
    data["is_template"] = False
    data.setdefault("currency", template.currency)

    blocks = [
        clone_block(block)
        for block in hydrate(SqlSectionStore(template).fetch(), seed_default=False)
    ]
    proposal = _new_proposal(actor_id=actor_id, data=data, default_currency=default_currency)
    proposal.template_id = template.id

    with transactional():
        db.session.add(proposal)
        db.session.flush()

        record_proposal_event(
            proposal_id=proposal.id,
            event_type=EventType.CREATED,
            event_data={"title": proposal.title, "template_id": template.id},
            user_email=actor_email,
        )

        SqlSectionStore(proposal).write(flatten(blocks))

    return proposal
