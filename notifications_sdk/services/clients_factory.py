from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Optional

from ..adapters.manage_client import NotificationsManageClient
from ..adapters.message_client import NotificationsMessageClient
from ..common.config import Settings, settings as default_settings
from ..common.logging import logger
from ..common.protocol import get_protocol


class ClientsFactory:
    """
    Creates clients from Settings, one per organization.
    Instances are cached for the lifetime of the factory so the tenant lookup
    of a manage client happens once per organization.
    """

    def __init__(self, cfg: Settings | None = None, **client_kwargs: Any) -> None:
        # private copy: token rotation must not leak into the global settings
        self.cfg = replace(cfg or default_settings)
        self.client_kwargs = client_kwargs
        self._manage: Dict[Optional[str], NotificationsManageClient] = {}
        self._message: Dict[Optional[str], NotificationsMessageClient] = {}

    def _key(self, organization_id: Optional[str]) -> Optional[str]:
        return organization_id or self.cfg.organization_id or None

    def manage(self, organization_id: Optional[str] = None) -> NotificationsManageClient:
        """Client for the given organization, or for the token's own one when None."""
        key = self._key(organization_id)
        if key in self._manage:
            return self._manage[key]
        client = NotificationsManageClient.from_settings(
            self.cfg, organization_id=key, **self.client_kwargs
        )
        logger.debug({"factory": "manage_client_created", "organization_id": key})
        self._manage[key] = client
        return client

    def message(self, organization_id: Optional[str] = None) -> NotificationsMessageClient:
        """Like manage(); with no organization the token's own one is looked up
        through the manage client, since the message API needs it in the path."""
        key = self._key(organization_id)
        if key is None and get_protocol(self.cfg.protocol).bearer_auth:
            key = self.manage(None).resolve_organization_id()
        if key in self._message:
            return self._message[key]
        client = NotificationsMessageClient.from_settings(
            self.cfg, organization_id=key, **self.client_kwargs
        )
        logger.debug({"factory": "message_client_created", "organization_id": key})
        self._message[key] = client
        return client

    def set_authorization_token(self, authorization_token: str) -> None:
        """Rotates the token for every cached client and for clients created later."""
        self.cfg.auth_token = authorization_token
        for client in (*self._manage.values(), *self._message.values()):
            client.set_authorization_token(authorization_token)
