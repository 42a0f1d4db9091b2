"""Compose a message and hand it to the mail service.

The service resource id and endpoint uri must be known (usually from service
discovery) before :meth:`MailDispatchService.send_mail` is used.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Optional

from .config import MailServiceConfig
from .errors import ConfigurationMissing, TransportFailure
from .message import build_message
from .providers.base import AuthenticationProvider, TransportFactory
from .providers.outlook import OutlookClient

logger = logging.getLogger(__name__)


def _new_result() -> Future[bool]:
    result: Future[bool] = Future()
    # A running future cannot be cancelled by the caller.
    result.set_running_or_notify_cancel()
    return result


class MailDispatchService:
    """Sends mail from the signed-in user's mailbox."""

    def __init__(
        self,
        config: MailServiceConfig,
        auth_provider: AuthenticationProvider,
        transport_factory: TransportFactory = OutlookClient,
    ) -> None:
        self.config = config
        self.auth_provider = auth_provider
        self.transport_factory = transport_factory

    def set_service_resource_id(self, resource_id: str) -> None:
        self.config.set_resource_id(resource_id)

    def set_service_endpoint_uri(self, endpoint_uri: str) -> None:
        self.config.set_endpoint_uri(endpoint_uri)

    def is_ready(self) -> bool:
        return self.config.is_ready()

    def check_ready(self) -> Optional[ConfigurationMissing]:
        """Return the configuration error that would stop a send, if any."""
        missing = self.config.missing_fields()
        if missing:
            return ConfigurationMissing(missing)
        return None

    def send_mail(self, email_address: str, subject: str, body: str) -> Future[bool]:
        """Send an HTML message to ``email_address``.

        Returns a future that resolves to ``True`` once the service accepts the
        message, or carries the error that stopped it. This method never
        raises: a missing configuration yields an already failed future and no
        collaborator is contacted.
        """
        result = _new_result()

        error = self.check_ready()
        if error is not None:
            logger.error("send_mail - %s", error)
            result.set_exception(error)
            return result

        resource_id = self.config.resource_id
        endpoint_uri = self.config.endpoint_uri

        def _on_complete(completed: Future[int]) -> None:
            if completed.cancelled():
                failure: BaseException | None = TransportFailure("Send was cancelled by the transport")
            else:
                failure = completed.exception()

            if failure is not None:
                logger.error("send_mail - %s", failure)
                result.set_exception(failure)
                return

            logger.info("send_mail - Email sent")
            logger.debug("send_mail - mail service returned id %s", completed.result())
            result.set_result(True)

        try:
            self.auth_provider.set_resource_id(resource_id)
            resolver = self.auth_provider.get_dependency_resolver()

            mail_client = self.transport_factory(endpoint_uri, resolver)
            message = build_message(email_address, subject, body)

            mail_sent = mail_client.send_message(message, True)
            mail_sent.add_done_callback(_on_complete)
        except Exception as exc:
            logger.error("send_mail - %s", exc)
            result.set_exception(exc)
        return result
