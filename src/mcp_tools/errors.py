"""Error types raised by the Solid Start recipe source."""

from typing import Optional


class CollaboratorError(Exception):
    """Failure talking to the recipe source (network, non-2xx, malformed payload)."""

    def __init__(self, status_code: Optional[int], message: str) -> None:
        self.status_code = status_code
        self.message = message
        status = status_code if status_code is not None else "no-status"
        super().__init__(f"SolidStart API error ({status}): {message}")


class AuthorizationError(CollaboratorError):
    """Upstream rejected the request credential (HTTP 401/403)."""


class NotFoundError(CollaboratorError):
    """Upstream has no such resource (HTTP 404)."""


def error_for_status(status_code: int, message: str) -> CollaboratorError:
    """Map an HTTP error status to the matching CollaboratorError subtype."""
    if status_code in (401, 403):
        return AuthorizationError(status_code, message)
    if status_code == 404:
        return NotFoundError(status_code, message)
    return CollaboratorError(status_code, message)
