"""Utility helpers to summarize sending results."""

from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


@dataclass
class DispatchOutcome:
    """Represents the outcome of sending a single email."""

    recipient: str
    success: bool
    error: Optional[str] = None


def collect_outcome(
    recipient: str, result: Future[bool], timeout: Optional[float] = None
) -> DispatchOutcome:
    """Wait for a send result and turn it into a :class:`DispatchOutcome`."""
    try:
        result.result(timeout=timeout)
    except FutureTimeoutError:
        logger.error("Timed out waiting for the send to %s", recipient)
        return DispatchOutcome(recipient=recipient, success=False, error="timed out")
    except Exception as exc:
        return DispatchOutcome(recipient=recipient, success=False, error=str(exc))
    return DispatchOutcome(recipient=recipient, success=True)


def summarize_results(results: Iterable[DispatchOutcome]) -> dict[str, int]:
    """Return a simple summary counting successful and failed sends."""
    counter = Counter()
    for result in results:
        if result.success:
            counter["success"] += 1
        else:
            counter["failure"] += 1
    return dict(counter)
