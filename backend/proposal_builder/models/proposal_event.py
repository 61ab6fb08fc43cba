from proposal_builder.extensions import db
from .base import BaseModel
from sqlalchemy import event


class ProposalEvent(BaseModel):
    __tablename__ = "proposal_events"

    __table_args__ = (
        db.Index("ix_event_cursor", "proposal_id", "created_at", "id"),
    )

    proposal_id = db.Column(db.String(36), db.ForeignKey("proposals.id"), nullable=False, index=True)
    event_type = db.Column(db.String(50), nullable=False, index=True)
    event_data = db.Column(db.JSON, nullable=False, default=dict)

    user_email = db.Column(db.String(200), nullable=True)
    user_name = db.Column(db.String(200), nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(512), nullable=True)

    proposal = db.relationship("Proposal", back_populates="events")


# Rows only ever leave with their proposal (relationship cascade).
@event.listens_for(ProposalEvent, 'before_update')
def prevent_event_mutation(mapper, connection, target):
    raise RuntimeError("Proposal events are immutable")
