from flask import request, jsonify
from proposal_builder.models.proposal import Proposal
from proposal_builder.application.proposals.record_view import record_first_view
from proposal_builder.normalizers.public import normalize_public_proposal
from proposal_builder.utils.audit import get_ip_address, get_user_agent
from . import v1_bp


@v1_bp.route("/public/proposals/<proposal_id>", methods=["GET"])
def view_proposal(proposal_id):
    """Client-facing read-only view. Access gating happens upstream."""
    proposal = Proposal.query.filter_by(
        id=proposal_id,
        is_template=False,
    ).first_or_404()

    rendered = normalize_public_proposal(proposal)

    record_first_view(
        proposal=proposal,
        ip_address=get_ip_address(request),
        user_agent=get_user_agent(request),
    )

    return jsonify(rendered)
