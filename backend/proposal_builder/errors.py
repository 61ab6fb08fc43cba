from flask import jsonify
from proposal_builder.domain.invariants.exceptions import InvariantViolation
from proposal_builder.domain.lifecycle.proposal import IllegalTransition
from proposal_builder.application.proposals.section_store import PersistenceError


def _error(name, error, status):
    response = jsonify({
        "error": name,
        "message": str(error)
    })
    response.status_code = status
    return response


def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        return _error("InvariantViolation", error, 400)

    @app.errorhandler(IllegalTransition)
    def handle_illegal_transition(error):
        return _error("IllegalTransition", error, 409)

    @app.errorhandler(ValueError)
    def handle_value_error(error):
        return _error("BadRequest", error, 400)

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(error):
        app.logger.error("Save failed: %s", error)
        return _error("PersistenceError", error, 500)
