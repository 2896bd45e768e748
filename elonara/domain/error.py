"""Domain layer errors.

The HTTP layer maps each of these to a status code and the
``{"success": false, "message": ...}`` envelope, so messages are written
for end users.
"""


class DomainError(Exception):
    """Base domain error."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Input failed domain validation (bad recipient, missing field)."""

    pass


class BusinessRuleViolationError(DomainError):
    """Business rule violation, e.g. the event reached its guest limit."""

    pass


class NotAuthorizedError(DomainError):
    """Raised when a user attempts an action they may not perform."""

    def __init__(
        self,
        action: str,
        resource: str,
        user_id: str | None,
        message: str | None = None,
    ):
        self.action = action
        self.resource = resource
        self.user_id = user_id
        super().__init__(
            message or f"You do not have permission to {action} this {resource}."
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found.

    Token lookups use the same message for unknown, malformed and expired
    tokens so callers cannot tell which one it was.
    """

    def __init__(self, resource: str, identifier: str, message: str | None = None):
        self.resource = resource
        self.identifier = identifier
        super().__init__(message or f"{resource} not found.")


class AlreadyResolvedError(DomainError):
    """The invitation was already declined or cancelled."""

    def __init__(self, status: str, message: str | None = None):
        self.status = status
        super().__init__(message or f"This invitation has already been {status}.")


class InvalidTransitionError(DomainError):
    """Attempted a status change the lifecycle does not allow.

    Also raised when a conditional update finds the row no longer in the
    expected state (another request resolved it first).
    """

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Invitation cannot move from {current} to {requested}."
        )
