"""Collaborators used to authenticate and deliver mail."""

from .auth import BearerTokenResolver, StaticTokenProvider
from .base import (
    AuthenticationProvider,
    CredentialResolver,
    MailTransportClient,
    TransportFactory,
)
from .outlook import OutlookClient

__all__ = [
    "AuthenticationProvider",
    "BearerTokenResolver",
    "CredentialResolver",
    "MailTransportClient",
    "OutlookClient",
    "StaticTokenProvider",
    "TransportFactory",
]
