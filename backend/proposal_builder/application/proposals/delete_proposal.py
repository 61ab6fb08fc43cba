import logging
from proposal_builder.extensions import db
from proposal_builder.models.proposal import Proposal
from proposal_builder.utils.transaction import transactional

logger = logging.getLogger(__name__)


def delete_proposal(*, proposal: Proposal) -> None:
    """
    Hard-delete a proposal with its sections and audit events.

    Sections and events go through the relationship cascade, so one
    delete removes the whole tree.
    """
    proposal_id = proposal.id
    section_count = len(proposal.sections)

    with transactional():
        db.session.delete(proposal)

    logger.info("Deleted proposal %s with %d sections", proposal_id, section_count)
