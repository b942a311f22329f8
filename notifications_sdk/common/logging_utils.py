"""Helpers that keep recipients, credentials and bodies out of the logs."""

from __future__ import annotations

import hashlib
from typing import Mapping

# headers whose values are credentials
SENSITIVE_HEADERS = frozenset({"authorization", "x-api-key", "cookie", "set-cookie"})


def mask_phone(phone: str | None) -> str | None:
    """Last four digits plus a short hash, stable across log lines."""
    if not phone:
        return phone
    digest = hashlib.sha256(phone.encode("utf-8")).hexdigest()[:8]
    return f"...{phone[-4:]}#{digest}"


def mask_email(email: str | None) -> str | None:
    if not email or "@" not in email:
        return email
    local, domain = email.split("@", 1)
    if not local:
        return email
    return f"{local[0]}...@{domain}"


def mask_token(token: str | None) -> str | None:
    if not token:
        return token
    if len(token) <= 8:
        return "***"
    return f"{token[:4]}...{token[-2:]}"


def shorten_body(body: str | None, max_len: int = 40) -> str | None:
    if body is None or len(body) <= max_len:
        return body
    return body[:max_len] + "..."


def redact_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    """Copy of the headers with credential values masked.

    A "Bearer <token>" value keeps its scheme: "Bearer abcd...yz".
    """
    redacted: dict[str, str] = {}
    for name, value in (headers or {}).items():
        if name.lower() not in SENSITIVE_HEADERS:
            redacted[name] = value
            continue
        scheme, sep, credential = (value or "").partition(" ")
        if sep and scheme.lower() == "bearer":
            redacted[name] = f"{scheme} {mask_token(credential)}"
        else:
            redacted[name] = mask_token(value) or ""
    return redacted
