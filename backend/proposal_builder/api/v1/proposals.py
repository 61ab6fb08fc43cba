# proposal_builder/api/v1/proposals.py
from flask import current_app, request, jsonify
from flask_jwt_extended import jwt_required
from proposal_builder.models.proposal import Proposal
from proposal_builder.models.proposal_event import ProposalEvent
from proposal_builder.application.proposals.create_proposal import (
    create_proposal as create_proposal_service,
    create_from_template as create_from_template_service,
)
from proposal_builder.application.proposals.update_proposal import update_proposal as update_proposal_service
from proposal_builder.application.proposals.delete_proposal import delete_proposal as delete_proposal_service
from proposal_builder.application.proposals.change_status import change_status
from proposal_builder.application.proposals.document import (
    apply_commands,
    load_document,
    save_document,
)
from proposal_builder.normalizers.document import normalize_document
from proposal_builder.normalizers.event import normalize_event
from proposal_builder.normalizers.pagination import normalize_pagination
from proposal_builder.normalizers.proposal import normalize_proposal
from proposal_builder.utils.decorators import (
    EDITOR_ROLES,
    current_user_email,
    current_user_id,
    roles_required,
)
from proposal_builder.utils.optimistic_lock import enforce_optimistic_lock
from proposal_builder.utils.pagination import paginate_cursor, parse_limit
from . import v1_bp


def _owned_proposal(proposal_id):
    return Proposal.query.filter_by(
        id=proposal_id,
        created_by=current_user_id(),
    ).first_or_404()


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        raise ValueError("Request body must be JSON")
    return data


# ------------------------
# Proposals
# ------------------------

@v1_bp.route("/proposals", methods=["GET"])
@jwt_required()
def list_proposals():
    templates = request.args.get("template", "0") in ("1", "true")

    query = Proposal.query.filter_by(
        created_by=current_user_id(),
        is_template=templates,
    )
    if status := request.args.get("status"):
        query = query.filter_by(status=status)

    items, cursor = paginate_cursor(
        query,
        model=Proposal,
        cursor=request.args.get("cursor"),
        limit=parse_limit(request.args.get("limit")),
    )

    return jsonify(normalize_pagination(items, normalize_proposal, cursor=cursor))


@v1_bp.route("/proposals", methods=["POST"])
@jwt_required()
@roles_required(*EDITOR_ROLES)
def create_proposal():
    data = request.get_json(silent=True) or {}

    proposal = create_proposal_service(
        actor_id=current_user_id(),
        actor_email=current_user_email(),
        data=data,
        default_currency=current_app.config["DEFAULT_CURRENCY"],
    )

    return jsonify({
        "id": proposal.id,
        "message": "Proposal created successfully"
    }), 201


@v1_bp.route("/proposals/from-template/<template_id>", methods=["POST"])
@jwt_required()
@roles_required(*EDITOR_ROLES)
def create_from_template(template_id):
    template = Proposal.query.filter_by(
        id=template_id,
        created_by=current_user_id(),
        is_template=True,
    ).first_or_404()

    proposal = create_from_template_service(
        actor_id=current_user_id(),
        actor_email=current_user_email(),
        template=template,
        data=request.get_json(silent=True) or {},
        default_currency=current_app.config["DEFAULT_CURRENCY"],
    )

    return jsonify({
        "id": proposal.id,
        "message": "Proposal created from template"
    }), 201


@v1_bp.route("/proposals/<proposal_id>", methods=["GET"])
@jwt_required()
def get_proposal(proposal_id):
    proposal = _owned_proposal(proposal_id)
    session = load_document(proposal)

    return jsonify({
        "proposal": normalize_proposal(proposal, admin=True),
        "document": normalize_document(session),
    })


@v1_bp.route("/proposals/<proposal_id>", methods=["PUT"])
@jwt_required()
@roles_required(*EDITOR_ROLES)
def update_proposal(proposal_id):
    proposal = _owned_proposal(proposal_id)
    enforce_optimistic_lock(proposal)

    update_proposal_service(
        proposal=proposal,
        actor_email=current_user_email(),
        data=_json_body(),
    )

    return jsonify({
        "proposal": normalize_proposal(proposal, admin=True),
        "message": "Proposal updated successfully"
    }), 200


@v1_bp.route("/proposals/<proposal_id>", methods=["DELETE"])
@jwt_required()
@roles_required(*EDITOR_ROLES)
def delete_proposal(proposal_id):
    proposal = _owned_proposal(proposal_id)
    delete_proposal_service(proposal=proposal)

    return jsonify({"message": "Proposal deleted successfully"}), 200


@v1_bp.route("/proposals/<proposal_id>/status", methods=["POST"])
@jwt_required()
@roles_required(*EDITOR_ROLES)
def update_status(proposal_id):
    proposal = _owned_proposal(proposal_id)
    data = _json_body()

    status = data.get("status")
    if not status:
        return jsonify({"error": "Status is required"}), 400

    return jsonify(change_status(
        proposal=proposal,
        to_status=status,
        actor_email=current_user_email(),
    )), 200


# ------------------------
# Document
# ------------------------

@v1_bp.route("/proposals/<proposal_id>/document", methods=["PUT"])
@jwt_required()
@roles_required(*EDITOR_ROLES)
def put_document(proposal_id):
    proposal = _owned_proposal(proposal_id)
    enforce_optimistic_lock(proposal)

    data = _json_body()
    blocks = data.get("blocks") if isinstance(data, dict) else data

    session = save_document(
        proposal=proposal,
        payload=blocks,
        actor_email=current_user_email(),
    )

    return jsonify({
        "document": normalize_document(session),
        "message": "Document saved"
    }), 200


@v1_bp.route("/proposals/<proposal_id>/document/commands", methods=["POST"])
@jwt_required()
@roles_required(*EDITOR_ROLES)
def post_commands(proposal_id):
    proposal = _owned_proposal(proposal_id)
    enforce_optimistic_lock(proposal)

    data = _json_body()
    commands = data.get("commands") if isinstance(data, dict) else None
    if not isinstance(commands, list):
        return jsonify({"error": "commands must be a list"}), 400

    session = apply_commands(
        proposal=proposal,
        commands=commands,
        actor_email=current_user_email(),
    )

    return jsonify({"document": normalize_document(session)}), 200


# ------------------------
# Audit trail
# ------------------------

@v1_bp.route("/proposals/<proposal_id>/events", methods=["GET"])
@jwt_required()
def list_events(proposal_id):
    proposal = _owned_proposal(proposal_id)

    query = ProposalEvent.query.filter_by(proposal_id=proposal.id)
    if event_type := request.args.get("event_type"):
        query = query.filter_by(event_type=event_type)

    items, cursor = paginate_cursor(
        query,
        model=ProposalEvent,
        cursor=request.args.get("cursor"),
        limit=parse_limit(request.args.get("limit")),
    )

    return jsonify(normalize_pagination(items, normalize_event, cursor=cursor))
