"""postforge-specific exceptions.

Workflow functions raise these; API routes translate them to HTTP codes.
"""


class NotFoundError(ValueError):
    """Raised when a referenced session, output or record doesn't exist (404)."""


class InvalidStateError(ValueError):
    """Raised when an operation isn't allowed in the entity's current state (400).

    Example: recording performance metrics on a session that isn't published.
    """
