from typing import Any, Iterable, Mapping, Optional
from proposal_builder.models.proposal import Proposal
from proposal_builder.domain.document.hydration import document_from_payload
from proposal_builder.utils.audit import EventType
from .audit_events import emit_event
from .editing_session import EditingSession
from .section_store import SqlSectionStore


def load_document(proposal: Proposal) -> EditingSession:
    """Hydrate the proposal's stored sections into an editing session."""
    return EditingSession.load(proposal.id, SqlSectionStore(proposal))


def _save(session: EditingSession, proposal: Proposal, actor_email: Optional[str], source: str):
    plan = session.save(SqlSectionStore(proposal))

    emit_event(
        proposal_id=proposal.id,
        event_type=EventType.EDITED,
        event_data={
            "source": source,
            "inserted": len(plan.inserts),
            "updated": len(plan.updates),
            "deleted": len(plan.deletes),
        },
        user_email=actor_email,
    )
    return session


def save_document(
    *,
    proposal: Proposal,
    payload: Any,
    actor_email: Optional[str],
) -> EditingSession:
    """
    Replace the stored document with a full editor document.

    Responsibilities:
    - strict parsing of the client document
    - invariant enforcement before any write
    - one storage write per block, in one transaction
    - EDITED audit event (fire-and-forget)
    """
    session = load_document(proposal)
    session.replace_document(document_from_payload(payload))
    return _save(session, proposal, actor_email, source="document")


def apply_commands(
    *,
    proposal: Proposal,
    commands: Iterable[Mapping[str, Any]],
    actor_email: Optional[str],
) -> EditingSession:
    """Run editor commands against the stored document, then save it."""
    session = load_document(proposal)
    for command in commands:
        session.apply(command)

    if not session.has_unsaved_changes:
        return session

    return _save(session, proposal, actor_email, source="commands")
