from flask import request, abort
from datetime import timezone
from dateutil.parser import parse, ParserError


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(proposal):
    """
    Rejects a save with 409 Conflict when the request carries
    If-Unmodified-Since and the proposal changed after that instant.
    Without the header the last writer wins.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts:
        return

    try:
        client_ts = normalize_ts(parse(client_ts))
    except (ParserError, OverflowError, ValueError):
        abort(400, description="Invalid If-Unmodified-Since header")

    if proposal.updated_at is None:
        return

    # HTTP dates have one-second resolution
    server_ts = normalize_ts(proposal.updated_at).replace(microsecond=0)

    if server_ts > client_ts:
        abort(
            409,
            description="Conflict detected. Proposal has been modified."
        )
