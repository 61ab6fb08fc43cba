from functools import wraps
from flask import jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity

EDITOR_ROLES = ("admin",)


def current_user_id() -> str:
    """Subject of the verified bearer token (issued by the auth provider)."""
    return str(get_jwt_identity())


def current_user_email():
    return get_jwt().get("email")


def roles_required(*allowed_roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            role = get_jwt().get("role")

            if role not in allowed_roles:
                return jsonify({"error": "Insufficient permissions"}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator
