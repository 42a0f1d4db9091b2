"""Configuration for the mail service discovered at connect time."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

logger = logging.getLogger(__name__)

RESOURCE_ID_ENV = "MAIL_SERVICE_RESOURCE_ID"
ENDPOINT_URI_ENV = "MAIL_SERVICE_ENDPOINT_URI"
HTTP_TIMEOUT_ENV = "MAIL_HTTP_TIMEOUT"
ACCESS_TOKEN_ENV = "MAIL_ACCESS_TOKEN"

DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass
class MailServiceConfig:
    """Resource id and endpoint uri of the mail service.

    Both values come from service discovery and must be set before the first
    send. Nothing here guards concurrent writes; set them once at startup.
    """

    resource_id: Optional[str] = None
    endpoint_uri: Optional[str] = None

    def set_resource_id(self, resource_id: Optional[str]) -> None:
        self.resource_id = resource_id

    def set_endpoint_uri(self, endpoint_uri: Optional[str]) -> None:
        self.endpoint_uri = endpoint_uri

    def missing_fields(self) -> List[str]:
        missing: List[str] = []
        if not self.resource_id:
            missing.append("ServiceResourceId")
        if not self.endpoint_uri:
            missing.append("ServiceEndpointUri")
        return missing

    def is_ready(self) -> bool:
        return not self.missing_fields()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MailServiceConfig":
        env = os.environ if environ is None else environ
        return cls(
            resource_id=env.get(RESOURCE_ID_ENV) or None,
            endpoint_uri=env.get(ENDPOINT_URI_ENV) or None,
        )


def http_timeout_from_env(environ: Mapping[str, str] | None = None) -> float:
    env = os.environ if environ is None else environ
    env_value = env.get(HTTP_TIMEOUT_ENV)

    if env_value is None or env_value == "":
        return DEFAULT_HTTP_TIMEOUT

    try:
        timeout = float(env_value)
    except ValueError:
        logger.warning(
            "Invalid %s value '%s'. Falling back to default (%s).",
            HTTP_TIMEOUT_ENV,
            env_value,
            DEFAULT_HTTP_TIMEOUT,
        )
        return DEFAULT_HTTP_TIMEOUT

    if timeout <= 0:
        logger.warning(
            "%s must be positive, got %s. Falling back to default (%s).",
            HTTP_TIMEOUT_ENV,
            env_value,
            DEFAULT_HTTP_TIMEOUT,
        )
        return DEFAULT_HTTP_TIMEOUT
    return timeout
