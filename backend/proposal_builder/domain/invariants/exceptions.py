class InvariantViolation(Exception):
    """Raised when a document breaks one of its structural invariants."""
