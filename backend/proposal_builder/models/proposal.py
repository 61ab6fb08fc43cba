from proposal_builder.extensions import db
from proposal_builder.domain.lifecycle.proposal import DRAFT
from .base import BaseModel

class Proposal(BaseModel):
    __tablename__ = "proposals"

    title = db.Column(db.String(200), nullable=False, default="Untitled")
    client_name = db.Column(db.String(200), nullable=True)
    client_email = db.Column(db.String(200), nullable=True)
    client_company = db.Column(db.String(200), nullable=True)
    custom_message = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(20), nullable=False, default=DRAFT, index=True)
    currency = db.Column(db.String(3), nullable=False, default="USD")
    total_amount = db.Column(db.Float, nullable=True)

    # Templates are proposals flagged for reuse
    is_template = db.Column(db.Boolean, nullable=False, default=False, index=True)
    template_id = db.Column(db.String(36), db.ForeignKey("proposals.id"), nullable=True)

    created_by = db.Column(db.String(36), nullable=False, index=True)

    sent_at = db.Column(db.DateTime(timezone=True), nullable=True)
    viewed_at = db.Column(db.DateTime(timezone=True), nullable=True)
    signed_at = db.Column(db.DateTime(timezone=True), nullable=True)
    paid_at = db.Column(db.DateTime(timezone=True), nullable=True)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=True)

    # Relationship to Sections (ordered, cascade deletes)
    sections = db.relationship(
        "ProposalSection",
        back_populates="proposal",
        order_by="ProposalSection.display_order",
        cascade="all, delete-orphan"
    )

    events = db.relationship(
        "ProposalEvent",
        back_populates="proposal",
        order_by="ProposalEvent.created_at",
        cascade="all, delete-orphan"
    )
