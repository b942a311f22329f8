from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..common.errors import ArgumentError
from ..common.protocol import ProtocolVersion


def _require_mapping(value: Any, name: str) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ArgumentError(f"{name} must be a simple object")
    return dict(value)


def _require_text(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ArgumentError(f"{name} is invalid.")
    return value


@dataclass
class EmailRecipient:
    name: str
    email: str

    def __post_init__(self) -> None:
        _require_text(self.email, "recipient email")
        if self.name is None:
            self.name = ""

    @classmethod
    def coerce(cls, value: Any) -> "EmailRecipient":
        """Accepts an EmailRecipient or anything shaped like one."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping) and "email" in value:
            return cls(name=value.get("name") or "", email=value["email"])
        raise ArgumentError("recipient must be an email recipient (name, email)")

    def to_payload(self, protocol: ProtocolVersion) -> Dict[str, Any]:
        return {
            protocol.field("name"): self.name,
            protocol.field("email"): self.email,
        }


@dataclass
class SmsRecipient:
    phone: str

    def __post_init__(self) -> None:
        _require_text(self.phone, "recipient phone")

    @classmethod
    def coerce(cls, value: Any) -> "SmsRecipient":
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping) and "phone" in value:
            return cls(phone=value["phone"])
        if isinstance(value, str):
            return cls(phone=value)
        raise ArgumentError("recipient must be an sms recipient (phone)")

    def to_payload(self, protocol: ProtocolVersion) -> Dict[str, Any]:
        return {protocol.field("phone"): self.phone}


@dataclass
class _TemplatedMessage:
    template_slug: str
    recipient: Any
    template_locale: Optional[str] = None
    merge_values: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, str]] = None
    sender_id: Optional[str] = None

    def __post_init__(self) -> None:
        _require_text(self.template_slug, "templateSlug")
        self.merge_values = _require_mapping(self.merge_values, "mergeValues")
        self.metadata = _require_mapping(self.metadata, "metadata")

    def to_payload(self, protocol: ProtocolVersion) -> Dict[str, Any]:
        """Wire body in the casing of the given protocol; unset fields are left out."""
        payload: Dict[str, Any] = {
            protocol.field("template_slug"): self.template_slug,
            protocol.field("template_locale"): self.template_locale,
            protocol.field("recipient"): self.recipient.to_payload(protocol),
            protocol.field("merge_values"): self.merge_values,
            protocol.field("metadata"): self.metadata,
            protocol.field("sender_id"): self.sender_id,
        }
        return {k: v for k, v in payload.items() if v is not None}


@dataclass
class EmailMessage(_TemplatedMessage):
    def __post_init__(self) -> None:
        super().__post_init__()
        self.recipient = EmailRecipient.coerce(self.recipient)


@dataclass
class SmsMessage(_TemplatedMessage):
    def __post_init__(self) -> None:
        super().__post_init__()
        self.recipient = SmsRecipient.coerce(self.recipient)
