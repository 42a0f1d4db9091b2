"""Send mail through a hosted mail service on behalf of the signed-in user."""

from .config import MailServiceConfig
from .dispatch import MailDispatchService
from .errors import (
    AuthenticationFailure,
    ConfigurationMissing,
    MailDispatchError,
    TransportFailure,
)

__all__ = [
    "AuthenticationFailure",
    "ConfigurationMissing",
    "MailDispatchError",
    "MailDispatchService",
    "MailServiceConfig",
    "TransportFailure",
]
