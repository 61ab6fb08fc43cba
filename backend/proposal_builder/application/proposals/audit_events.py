import logging
from sqlalchemy.exc import SQLAlchemyError
from proposal_builder.utils.audit import record_proposal_event
from proposal_builder.utils.transaction import transactional

logger = logging.getLogger(__name__)


def emit_event(*, proposal_id: str, event_type: str, **fields) -> bool:
    """
    Fire-and-forget audit event in its own transaction.

    A failure is logged and reported as False; it never reaches the caller
    as an exception.
    """
    try:
        with transactional():
            record_proposal_event(
                proposal_id=proposal_id,
                event_type=event_type,
                **fields,
            )
        return True
    except SQLAlchemyError:
        logger.exception("Failed to record %s event for proposal %s", event_type, proposal_id)
        return False
