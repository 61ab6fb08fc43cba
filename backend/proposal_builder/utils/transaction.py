import logging
from contextlib import contextmanager
from proposal_builder.extensions import db

logger = logging.getLogger(__name__)

@contextmanager
def transactional():
    """Commit on success; roll back and re-raise on any failure."""
    try:
        yield
        db.session.commit()
    except Exception:
        logger.debug("Rolling back transaction", exc_info=True)
        db.session.rollback()
        raise
