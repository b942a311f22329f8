"""Wire-level differences between the notification API generations.

Both generations talk to the same kind of endpoints but disagree on:
  * where the vendor media type goes (Content-Type vs Accept),
  * whether the token is sent raw or as "Bearer <token>",
  * the casing of JSON field names (and of the error field),
  * what the tenant scope is called (customer vs organization),
  * how the tenant id is found in the /manage/info payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .errors import ArgumentError

SCOPE_PLACEHOLDER = "{{scopeID}}"

VENDOR_MEDIA_TYPE = "application/vnd.notification.{tag}.v1+json"


def vendor_media_type(tag: str) -> str:
    return VENDOR_MEDIA_TYPE.format(tag=tag)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    # the API spells id suffixes as "ID" (senderID, messageID)
    return head + "".join("ID" if p == "id" else p[:1].upper() + p[1:] for p in rest)


def _pascal(name: str) -> str:
    c = _camel(name)
    return c[:1].upper() + c[1:]


@dataclass(frozen=True)
class ProtocolVersion:
    name: str
    media_type_header: str  # "Content-Type" or "Accept"
    bearer_auth: bool
    casing: str  # "camel" or "pascal"
    error_fields: Tuple[str, ...]
    scope_entity: str  # path segment: "customer" or "organization"
    scope_collection: str

    def headers(self, tag: str, token: str) -> dict[str, str]:
        media_type = vendor_media_type(tag)
        if self.media_type_header == "Accept":
            h = {"Accept": media_type, "Content-Type": "application/json"}
        else:
            h = {"Content-Type": media_type}
        h["Authorization"] = f"Bearer {token}" if self.bearer_auth else (token or "")
        return h

    def field(self, snake_name: str) -> str:
        """Wire name of a snake_case field, e.g. template_slug -> templateSlug."""
        if self.casing == "pascal":
            return _pascal(snake_name)
        return _camel(snake_name)

    def error_message(self, body: Any) -> Optional[str]:
        if not isinstance(body, dict):
            return None
        for key in self.error_fields:
            value = body.get(key)
            if value:
                return str(value)
        return None

    def scope_id_from_info(self, info: Any) -> Optional[str]:
        if not isinstance(info, dict):
            return None

        if self.casing == "pascal":
            value = info.get("CustomerID")
            return str(value) if value else None

        # current generation: {"accounts": [{"organizationID": ...}, ...]}
        accounts = info.get("accounts") or []
        if isinstance(accounts, list):
            for account in accounts:
                if isinstance(account, dict) and account.get("organizationID"):
                    return str(account["organizationID"])
        value = info.get("organizationID")
        return str(value) if value else None

    def scoped(self, suffix: str) -> str:
        """Path under the caller's tenant: /manage/<entity>/{{scopeID}}<suffix>."""
        return f"/manage/{self.scope_entity}/{SCOPE_PLACEHOLDER}{suffix}"


LEGACY = ProtocolVersion(
    name="legacy",
    media_type_header="Content-Type",
    bearer_auth=False,
    casing="pascal",
    error_fields=("Error", "error"),
    scope_entity="customer",
    scope_collection="customers",
)

CURRENT = ProtocolVersion(
    name="current",
    media_type_header="Accept",
    bearer_auth=True,
    casing="camel",
    error_fields=("error", "Error", "message"),
    scope_entity="organization",
    scope_collection="organizations",
)

PROTOCOLS = {p.name: p for p in (LEGACY, CURRENT)}


def get_protocol(name: str | ProtocolVersion | None) -> ProtocolVersion:
    if isinstance(name, ProtocolVersion):
        return name
    key = (name or "current").strip().lower()
    try:
        return PROTOCOLS[key]
    except KeyError:
        raise ArgumentError(f"Unknown protocol version: {name!r}") from None
