"""Outbound message model in the shape the mail service expects."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class BodyType(str, Enum):
    HTML = "HTML"
    TEXT = "Text"


@dataclass
class EmailAddress:
    address: str
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"Address": self.address}
        if self.name:
            data["Name"] = self.name
        return data


@dataclass
class Recipient:
    email_address: EmailAddress

    def to_dict(self) -> Dict[str, Any]:
        return {"EmailAddress": self.email_address.to_dict()}


@dataclass
class ItemBody:
    content: str
    content_type: BodyType = BodyType.HTML

    def to_dict(self) -> Dict[str, Any]:
        return {"ContentType": self.content_type.value, "Content": self.content}


@dataclass
class Message:
    """A message ready to hand to a transport client."""

    subject: str
    body: ItemBody
    to_recipients: List[Recipient] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Subject": self.subject,
            "Body": self.body.to_dict(),
            "ToRecipients": [recipient.to_dict() for recipient in self.to_recipients],
        }


def build_message(address: str, subject: str, body: str) -> Message:
    """Build a single-recipient message with an HTML body."""
    recipient = Recipient(email_address=EmailAddress(address=address))
    return Message(
        subject=subject,
        body=ItemBody(content=body, content_type=BodyType.HTML),
        to_recipients=[recipient],
    )
