"""Transport client for the Outlook REST mail API."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Dict, Optional

import requests

from ..config import DEFAULT_HTTP_TIMEOUT
from ..errors import TransportFailure
from ..message import Message
from .base import CredentialResolver, MailTransportClient

logger = logging.getLogger(__name__)

SEND_MAIL_PATH = "/me/sendmail"

_EXECUTOR_LOCK = threading.Lock()
_DEFAULT_EXECUTOR: Optional[ThreadPoolExecutor] = None


def _default_executor() -> ThreadPoolExecutor:
    global _DEFAULT_EXECUTOR
    with _EXECUTOR_LOCK:
        if _DEFAULT_EXECUTOR is None:
            _DEFAULT_EXECUTOR = ThreadPoolExecutor(
                max_workers=4, thread_name_prefix="mailconnect-transport"
            )
        return _DEFAULT_EXECUTOR


def build_send_payload(message: Message, save_to_sent_items: bool) -> Dict[str, Any]:
    return {"Message": message.to_dict(), "SaveToSentItems": save_to_sent_items}


class OutlookClient(MailTransportClient):
    """Sends messages as the signed-in user through ``<endpoint>/me/sendmail``.

    Requests run on ``executor``; without one, a small pool shared by every
    client in the process is used.
    """

    def __init__(
        self,
        endpoint_uri: str,
        resolver: CredentialResolver,
        *,
        session: requests.Session | None = None,
        timeout: Optional[float] = None,
        executor: Executor | None = None,
    ) -> None:
        self.endpoint_uri = endpoint_uri
        self.resolver = resolver
        self.timeout = timeout or DEFAULT_HTTP_TIMEOUT
        self._session = session
        self._executor = executor

    @property
    def send_mail_url(self) -> str:
        return self.endpoint_uri.rstrip("/") + SEND_MAIL_PATH

    def _post(self, payload: Dict[str, Any]) -> int:
        headers = self.resolver.authorize(
            {"Accept": "application/json", "Content-Type": "application/json"}
        )
        session = self._session or requests.Session()
        try:
            response = session.post(
                self.send_mail_url, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise TransportFailure(f"Could not reach mail service: {exc}") from exc
        finally:
            if self._session is None:
                session.close()

        if response.status_code >= 400:
            raise TransportFailure(
                f"Mail service answered {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        logger.debug("Mail service accepted message with status %s", response.status_code)
        return response.status_code

    def send_message(self, message: Message, save_to_sent_items: bool) -> Future[int]:
        payload = build_send_payload(message, save_to_sent_items)
        executor = self._executor or _default_executor()
        return executor.submit(self._post, payload)
