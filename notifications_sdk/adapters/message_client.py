from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import requests

from ..common.config import Settings, settings as default_settings
from ..common.errors import ArgumentError
from ..common.logging import logger
from ..common.logging_utils import mask_email, mask_phone
from ..common.protocol import CURRENT, SCOPE_PLACEHOLDER, ProtocolVersion, get_protocol
from ..domain.models import EmailMessage, SmsMessage
from .request_executor import RequestExecutor


def _coerce_message(message: Any, cls: type) -> Any:
    if isinstance(message, cls):
        return message
    if isinstance(message, Mapping):
        try:
            return cls(**message)
        except TypeError as e:
            raise ArgumentError(f"Invalid {cls.__name__} fields: {e}") from e
    raise ArgumentError(f"message must be an {cls.__name__}")


class NotificationsMessageClient:
    """Client for the message sending API (queue an email or SMS from a template)."""

    def __init__(
        self,
        base_url: str,
        authorization_token: str,
        organization_id: Optional[str] = None,
        *,
        protocol: ProtocolVersion | str = CURRENT,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.protocol = get_protocol(protocol)
        executor = RequestExecutor(
            base_url,
            authorization_token,
            protocol=self.protocol,
            info_path=None,
            session=session,
            timeout=timeout,
        )

        # the legacy endpoints derive the organization from the token
        if self.protocol.bearer_auth:
            if not authorization_token:
                raise ArgumentError("authorizationToken is invalid.")
            if not organization_id:
                raise ArgumentError("organizationID is invalid.")
            executor.set_scope(organization_id)
            self._prefix = f"/message/{SCOPE_PLACEHOLDER}"
        else:
            self._prefix = "/message"

        self._executor = executor

    @classmethod
    def from_settings(cls, cfg: Settings | None = None, **kwargs: Any) -> "NotificationsMessageClient":
        cfg = cfg or default_settings
        organization_id = kwargs.pop("organization_id", None) or cfg.organization_id or None
        kwargs.setdefault("protocol", cfg.protocol)
        kwargs.setdefault("timeout", cfg.http_timeout_s)
        return cls(
            cfg.get_message_base_url(),
            cfg.auth_token,
            organization_id,
            **kwargs,
        )

    def get_base_url(self) -> str:
        return self._executor.base_url

    @property
    def organization_id(self) -> Optional[str]:
        return self._executor.scope_id

    def set_authorization_token(self, authorization_token: str) -> None:
        self._executor.authorization_token = authorization_token

    def send_email(self, message: EmailMessage | Mapping[str, Any]) -> Dict[str, Any]:
        """Queue an email message for sending."""
        msg = _coerce_message(message, EmailMessage)
        result = self._executor.execute(
            f"{self._prefix}/email",
            "POST",
            "create-email",
            msg.to_payload(self.protocol),
        )
        logger.info(
            {
                "message": "email_queued",
                "template": msg.template_slug,
                "to": mask_email(msg.recipient.email),
            }
        )
        return result

    def send_sms(self, message: SmsMessage | Mapping[str, Any]) -> Dict[str, Any]:
        """Queue an SMS message for sending."""
        msg = _coerce_message(message, SmsMessage)
        result = self._executor.execute(
            f"{self._prefix}/sms",
            "POST",
            "create-sms",
            msg.to_payload(self.protocol),
        )
        logger.info(
            {
                "message": "sms_queued",
                "template": msg.template_slug,
                "to": mask_phone(msg.recipient.phone),
            }
        )
        return result
