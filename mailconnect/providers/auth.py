"""Authentication provider backed by tokens acquired elsewhere."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, MutableMapping, Optional

from ..errors import AuthenticationFailure
from .base import AuthenticationProvider, CredentialResolver

logger = logging.getLogger(__name__)


class BearerTokenResolver(CredentialResolver):
    """Adds an OAuth bearer token to request headers."""

    def __init__(self, token: str) -> None:
        self._token = token

    def authorize(self, headers: MutableMapping[str, str]) -> MutableMapping[str, str]:
        headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def __repr__(self) -> str:
        return "BearerTokenResolver(token=***)"


class StaticTokenProvider(AuthenticationProvider):
    """Serves bearer tokens that were obtained by a sign-in flow.

    Tokens are keyed by resource id. A provider created with ``default_token``
    uses it for any resource that has no token of its own.
    """

    def __init__(
        self,
        tokens: Mapping[str, str] | None = None,
        *,
        default_token: Optional[str] = None,
    ) -> None:
        self._tokens: Dict[str, str] = dict(tokens or {})
        self._default_token = default_token
        self._resource_id: Optional[str] = None

    def add_token(self, resource_id: str, token: str) -> None:
        self._tokens[resource_id] = token

    def set_resource_id(self, resource_id: str) -> None:
        self._resource_id = resource_id

    def get_dependency_resolver(self) -> BearerTokenResolver:
        if self._resource_id is None:
            raise AuthenticationFailure("No resource id selected for authentication")

        token = self._tokens.get(self._resource_id) or self._default_token
        if not token:
            raise AuthenticationFailure(
                f"No signed-in session for resource {self._resource_id}",
                resource_id=self._resource_id,
            )
        logger.debug("Issuing credential resolver for resource %s", self._resource_id)
        return BearerTokenResolver(token)
