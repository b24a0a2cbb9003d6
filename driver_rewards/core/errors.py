# driver_rewards/core/errors.py

from fastapi import status


class RewardsError(Exception):
    """
    Base class for errors that are surfaced to the caller as a 4xx/5xx
    response with a machine-readable reason.
    """
    status_code: int = status.HTTP_400_BAD_REQUEST
    reason: str = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message, "reason": self.reason}


class ValidationError(RewardsError):
    reason = "validation_error"


class LimitExceededError(RewardsError):
    """An upper, lower or monthly organization bound would be violated."""

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind

    @property
    def reason(self) -> str:
        return f"limit_exceeded:{self.kind}"


class InsufficientPointsError(RewardsError):
    reason = "insufficient_points"

    def __init__(self, required: int, balance: int):
        super().__init__(f"Order total of {required} points exceeds the current balance of {balance} points.")
        self.required = required
        self.balance = balance


class NoActiveCartError(RewardsError):
    status_code = status.HTTP_404_NOT_FOUND
    reason = "no_active_cart"


class NotFoundError(RewardsError):
    status_code = status.HTTP_404_NOT_FOUND
    reason = "not_found"


class ForbiddenError(RewardsError):
    status_code = status.HTTP_403_FORBIDDEN
    reason = "forbidden"


class ConflictError(RewardsError):
    status_code = status.HTTP_409_CONFLICT
    reason = "conflict"


class AuthenticationError(RewardsError):
    status_code = status.HTTP_401_UNAUTHORIZED
    reason = "authentication_failed"


class AccountLockedError(RewardsError):
    status_code = status.HTTP_403_FORBIDDEN
    reason = "account_locked"


class UpstreamUnavailableError(RewardsError):
    """The external marketplace (or its OAuth endpoint) could not be reached."""
    status_code = status.HTTP_502_BAD_GATEWAY
    reason = "upstream_unavailable"
