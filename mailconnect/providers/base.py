"""Interfaces of the collaborators the dispatch service depends on."""

from __future__ import annotations

from concurrent.futures import Future
from typing import MutableMapping, Protocol

from ..message import Message


class CredentialResolver(Protocol):
    """Attaches authentication material to outgoing requests."""

    def authorize(self, headers: MutableMapping[str, str]) -> MutableMapping[str, str]:
        """Add credentials to ``headers`` and return them."""


class AuthenticationProvider(Protocol):
    """Supplies credential resolvers scoped to a service resource id."""

    def set_resource_id(self, resource_id: str) -> None:
        """Select the resource the next resolver is issued for."""

    def get_dependency_resolver(self) -> CredentialResolver:
        """Return a resolver for the current resource.

        Raises :class:`~mailconnect.errors.AuthenticationFailure` when there is
        no signed-in session for it.
        """


class MailTransportClient(Protocol):
    """Client of the remote mail service."""

    def send_message(self, message: Message, save_to_sent_items: bool) -> Future[int]:
        """Start sending ``message`` and return a future with the message id."""


class TransportFactory(Protocol):
    def __call__(self, endpoint_uri: str, resolver: CredentialResolver) -> MailTransportClient:
        ...
