"""Exceptions raised while dispatching mail."""

from __future__ import annotations

from typing import Sequence


class MailDispatchError(RuntimeError):
    """Base class for every error surfaced by a send operation."""


class ConfigurationMissing(MailDispatchError):
    """Raised when the service resource id or endpoint uri has not been set."""

    def __init__(self, missing_fields: Sequence[str]) -> None:
        self.missing_fields = list(missing_fields)
        message = (
            "You must set the ServiceResourceId and ServiceEndpointUri before "
            "using send_mail (missing: " + ", ".join(self.missing_fields) + ")"
        )
        super().__init__(message)


class AuthenticationFailure(MailDispatchError):
    """Raised when no credential is available for the requested resource."""

    def __init__(self, message: str, resource_id: str | None = None) -> None:
        self.resource_id = resource_id
        super().__init__(message)


class TransportFailure(MailDispatchError):
    """Raised when the mail service rejects or fails to receive a message."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
