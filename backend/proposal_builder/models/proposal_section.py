from proposal_builder.extensions import db
from .base import BaseModel

class ProposalSection(BaseModel):
    """One stored block; elements live inside the JSON content."""
    __tablename__ = "proposal_sections"

    proposal_id = db.Column(db.String(36), db.ForeignKey("proposals.id"), nullable=False, index=True)
    section_type = db.Column(db.String(100), nullable=False, default="text")
    title = db.Column(db.String(200), nullable=True)
    content = db.Column(db.JSON, nullable=False, default=dict)  # {background_color, elements}
    display_order = db.Column(db.Integer, nullable=False, default=0)
    is_visible = db.Column(db.Boolean, nullable=False, default=True)

    # Relationship to parent Proposal
    proposal = db.relationship("Proposal", back_populates="sections")

    __table_args__ = (
        db.Index("idx_section_proposal_order", "proposal_id", "display_order"),
    )

    def to_record(self):
        return {
            "id": self.id,
            "display_order": self.display_order,
            "section_type": self.section_type,
            "title": self.title,
            "content": self.content,
            "is_visible": self.is_visible,
        }
