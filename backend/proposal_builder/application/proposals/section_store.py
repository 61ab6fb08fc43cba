import logging
from typing import Any, Dict, List, Protocol

from sqlalchemy.exc import SQLAlchemyError

from proposal_builder.extensions import db
from proposal_builder.models.base import utc_now
from proposal_builder.models.proposal import Proposal
from proposal_builder.models.proposal_section import ProposalSection
from proposal_builder.domain.document.hydration import SavePlan
from proposal_builder.domain.document.pricing import content_total
from proposal_builder.utils.transaction import transactional

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """A save round-trip failed; carries the underlying storage message."""


class SectionStore(Protocol):
    def fetch(self) -> List[Dict[str, Any]]:
        ...

    def apply(self, plan: SavePlan) -> None:
        ...


class SqlSectionStore:
    """Section storage for one proposal, backed by the SQLAlchemy session."""

    def __init__(self, proposal: Proposal):
        self.proposal = proposal

    def fetch(self) -> List[Dict[str, Any]]:
        rows = (
            ProposalSection.query
            .filter_by(proposal_id=self.proposal.id)
            .order_by(ProposalSection.display_order.asc())
            .all()
        )
        return [row.to_record() for row in rows]

    def apply(self, plan: SavePlan) -> None:
        """
        Write every entry of the plan in one transaction.

        Responsibilities:
        - delete sections dropped from the document
        - update stored sections, insert pending ones
        - keep the proposal total in step with its pricing elements
        """
        try:
            with transactional():
                self.write(plan)
        except SQLAlchemyError as exc:
            message = str(getattr(exc, "orig", None) or exc)
            logger.error("Saving proposal %s failed: %s", self.proposal.id, message)
            raise PersistenceError(message) from exc

    def _section(self, section_id: str) -> ProposalSection:
        section = ProposalSection.query.filter_by(
            id=section_id,
            proposal_id=self.proposal.id,
        ).first()
        if section is None:
            raise PersistenceError(f"Section {section_id} not found")
        return section

    def write(self, plan: SavePlan) -> None:
        """Stage the plan on the current session; the caller commits."""
        for section_id in plan.deletes:
            section = ProposalSection.query.filter_by(
                id=section_id,
                proposal_id=self.proposal.id,
            ).first()
            if section is not None:
                db.session.delete(section)

        for payload in plan.updates:
            section = self._section(payload["id"])
            section.content = payload["content"]
            section.display_order = payload["display_order"]
            section.is_visible = payload["is_visible"]

        for payload in plan.inserts:
            section = ProposalSection()
            section.proposal_id = self.proposal.id
            section.section_type = payload["section_type"]
            section.title = payload["title"]
            section.content = payload["content"]
            section.display_order = payload["display_order"]
            section.is_visible = payload["is_visible"]
            db.session.add(section)

        self.proposal.total_amount = content_total(
            payload["content"]
            for payload in plan.updates + plan.inserts
            if payload["is_visible"]
        )
        self.proposal.updated_at = utc_now()
