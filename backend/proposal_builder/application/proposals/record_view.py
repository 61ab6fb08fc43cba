import logging
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from proposal_builder.models.base import utc_now
from proposal_builder.models.proposal import Proposal
from proposal_builder.domain.lifecycle.proposal import SENT, VIEWED
from proposal_builder.utils.audit import EventType, record_proposal_event
from proposal_builder.utils.transaction import transactional

logger = logging.getLogger(__name__)


def record_first_view(
    *,
    proposal: Proposal,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> bool:
    """
    Stamp viewed_at and emit VIEWED the first time a client opens the
    proposal. Later views do nothing.

    Fire-and-forget: a storage failure is logged and never fails the view.
    """
    if proposal.viewed_at is not None:
        return False

    try:
        with transactional():
            proposal.viewed_at = utc_now()
            if proposal.status == SENT:
                proposal.status = VIEWED

            record_proposal_event(
                proposal_id=proposal.id,
                event_type=EventType.VIEWED,
                event_data={},
                ip_address=ip_address,
                user_agent=user_agent,
            )
        return True
    except SQLAlchemyError:
        logger.exception("Failed to record first view of proposal %s", proposal.id)
        return False
