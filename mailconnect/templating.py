"""Jinja2 rendering of the subject and HTML body of outgoing mail."""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Tuple

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, UndefinedError

DEFAULT_SUBJECT_TEMPLATE = "Welcome to Office 365 development with the Connect sample"

DEFAULT_BODY_TEMPLATE = (
    "<html><body>"
    "<h2>Congratulations {{ name }}!</h2>"
    "<p>This is a message from the mail connect sample. "
    "You are well on your way to incorporating Office 365 services in your apps.</p>"
    "<p>Sent on {{ sent_at.strftime('%Y-%m-%d') }} at {{ sent_at.strftime('%H:%M') }}.</p>"
    "</body></html>"
)


class TemplateRenderingError(RuntimeError):
    """Raised when the subject or body template cannot be rendered."""

    def __init__(self, part: str, reason: str) -> None:
        self.part = part
        self.reason = reason
        super().__init__(f"Cannot render the {part} template: {reason}")


# The body goes out as HTML exactly as written, so nothing is escaped here.
_ENV = Environment(autoescape=False, undefined=StrictUndefined)


def _render_part(part: str, template: str, context: Mapping[str, object]) -> str:
    try:
        return _ENV.from_string(template).render(context)
    except (UndefinedError, TemplateSyntaxError) as exc:
        raise TemplateRenderingError(part, exc.message or str(exc)) from exc


def render(
    subject_template: str, body_template: str, context: Mapping[str, object]
) -> Tuple[str, str]:
    """Render the subject and body; ``sent_at`` defaults to the current time."""
    values = {"sent_at": datetime.now(), **context}
    return (
        _render_part("subject", subject_template, values),
        _render_part("body", body_template, values),
    )
