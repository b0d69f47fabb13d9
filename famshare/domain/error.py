"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    pass


class NotAuthenticatedError(DomainError):
    """Raised when an operation needs a signed-in user and there is none."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class NotAuthorizedError(DomainError):
    """Raised when a user attempts an action their role does not allow."""

    def __init__(self, resource: str, resource_id: str, user_id: str):
        self.resource = resource
        self.resource_id = resource_id
        self.user_id = user_id
        super().__init__(
            f"User {user_id} is not authorized to manage {resource} {resource_id}"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvitationNotFoundError(NotFoundError):
    """Invitation is missing, already accepted, revoked or orphaned."""

    def __init__(self, invitation_id: str):
        super().__init__("Invitation", invitation_id)


class InvitationExpiredError(InvitationNotFoundError):
    """Invitation exists but its expiry has passed."""

    def __init__(self, invitation_id: str):
        super().__init__(invitation_id)
        self.args = (f"Invitation expired: {invitation_id}",)


class InvitationTargetMismatchError(DomainError):
    """Invitation is addressed to someone other than the accepting user.

    The message deliberately omits the account the invitation belongs to.
    """

    def __init__(self, invitation_id: str):
        self.invitation_id = invitation_id
        super().__init__(
            f"Invitation {invitation_id} is addressed to a different email or phone"
        )


class CannotShareWithSelfError(DomainError):
    """Raised when a user invites themselves or accepts into their own account."""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Cannot share account {account_id} with yourself")


class RetryableError(DomainError):
    """Transient failure; the caller may retry with backoff."""

    retryable = True


class StoreUnavailableError(RetryableError):
    """Durable store could not be reached or timed out."""

    pass


class IdentityProviderUnavailableError(RetryableError):
    """Identity provider could not be reached or answered with an error."""

    pass


class ResolutionTimeoutError(RetryableError):
    """Identity resolution did not finish within its timeout."""

    pass


class DispatchFailedError(DomainError):
    """Invitation message could not be delivered.

    Soft failure: logged and reported as a warning, never raised to callers
    of invitation creation.
    """

    pass
