from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, Optional
from urllib.parse import quote

import requests

from ..common.config import Settings, settings as default_settings
from ..common.logging import logger
from ..common.logging_utils import mask_token
from ..common.protocol import CURRENT, ProtocolVersion, get_protocol
from .request_executor import RequestExecutor


def _enc(value: str) -> str:
    return quote(str(value), safe="")


class NotificationsManageClient:
    """Client for the notification management API.

    Most endpoints live under the caller's tenant
    (``/manage/organization/<id>/...``, ``/manage/customer/<id>/...`` for the
    legacy protocol). When no tenant id is configured it is looked up once via
    ``get_info()`` before the first tenant-scoped request.
    """

    def __init__(
        self,
        base_url: str,
        authorization_token: str,
        *,
        organization_id: Optional[str] = None,
        protocol: ProtocolVersion | str = CURRENT,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.protocol = get_protocol(protocol)
        self._executor = RequestExecutor(
            base_url,
            authorization_token,
            protocol=self.protocol,
            scope_id=organization_id,
            session=session,
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, cfg: Settings | None = None, **kwargs: Any) -> "NotificationsManageClient":
        cfg = cfg or default_settings
        logger.debug(
            {
                "manage": "from_settings",
                "base_url": cfg.get_manage_base_url(),
                "token": mask_token(cfg.auth_token),
                "protocol": cfg.protocol,
            }
        )
        kwargs.setdefault("organization_id", cfg.organization_id or None)
        kwargs.setdefault("protocol", cfg.protocol)
        kwargs.setdefault("timeout", cfg.http_timeout_s)
        return cls(cfg.get_manage_base_url(), cfg.auth_token, **kwargs)

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    def get_base_url(self) -> str:
        return self._executor.base_url

    @property
    def organization_id(self) -> Optional[str]:
        return self._executor.scope_id

    def set_authorization_token(self, authorization_token: str) -> None:
        """Token used by every request made after this call."""
        self._executor.authorization_token = authorization_token

    def resolve_organization_id(self) -> str:
        """Configured organization id, or the token's own one (looked up once)."""
        return self._executor.ensure_scope()

    def configure_for_override_organization(self, organization_id: str) -> None:
        """Send all tenant-scoped requests for the given organization."""
        self._executor.set_scope(organization_id)

    def clear_override_organization(self) -> None:
        """Go back to the organization of the authorization token (looked up on next call)."""
        self._executor.clear_scope()

    # legacy naming
    configure_for_override_customer = configure_for_override_organization
    clear_override_customer = clear_override_organization

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _request(self, path: str, method: str, tag: str, body: Any = None, query: Dict[str, Any] | None = None) -> Any:
        return self._executor.execute(path, method, tag, body, query)

    def _payload(self, data: Any) -> Any:
        to_payload = getattr(data, "to_payload", None)
        return to_payload(self.protocol) if callable(to_payload) else data

    def _list(self, suffix: str, tag: str, page_size: int, next_page: Optional[str]) -> Any:
        return self._request(
            self.protocol.scoped(suffix),
            "GET",
            tag,
            query={"pagesize": str(page_size), "nextpage": next_page},
        )

    def iter_results(
        self,
        list_method: Callable[[int, Optional[str]], Any],
        page_size: int = 100,
    ) -> Iterator[Any]:
        """Walks every page of a list method, e.g. ``iter_results(client.get_templates)``."""
        results_key = self.protocol.field("results")
        next_key = self.protocol.field("next_page")
        next_page: Optional[str] = None
        while True:
            page = list_method(page_size, next_page) or {}
            for item in page.get(results_key) or []:
                yield item
            next_page = page.get(next_key)
            if not next_page:
                return

    # ------------------------------------------------------------------ #
    # Info / API keys
    # ------------------------------------------------------------------ #

    def get_info(self) -> Dict[str, Any]:
        """Info about the authenticated principal (its accounts/organization)."""
        return self._request("/manage/info", "GET", "get-info")

    def generate_api_key(self) -> Dict[str, Any]:
        return self._request("/manage/apikey", "POST", "create-apikey")

    # ------------------------------------------------------------------ #
    # Messages
    # ------------------------------------------------------------------ #

    def get_messages(self, page_size: int, next_page: Optional[str] = None) -> Dict[str, Any]:
        return self._list("/messages", "list-message", page_size, next_page)

    def get_message(self, message_id: str) -> Dict[str, Any]:
        return self._request(self.protocol.scoped(f"/message/{_enc(message_id)}"), "GET", "get-message")

    def create_email_message(self, email_message: Any, test: bool = False) -> Dict[str, Any]:
        tag = "create-test-email-message" if test else "create-email-message"
        return self._request(self.protocol.scoped("/message"), "POST", tag, self._payload(email_message))

    def create_sms_message(self, sms_message: Any, test: bool = False) -> Dict[str, Any]:
        tag = "create-test-sms-message" if test else "create-sms-message"
        return self._request(self.protocol.scoped("/message"), "POST", tag, self._payload(sms_message))

    # ------------------------------------------------------------------ #
    # Organizations (customers in the legacy protocol)
    #
    # These endpoints take the organization id explicitly, so they never
    # trigger the tenant lookup.
    # ------------------------------------------------------------------ #

    def get_organizations(self, page_size: int, next_page: Optional[str] = None) -> Dict[str, Any]:
        """Only an admin key can list organizations."""
        entity = self.protocol.scope_entity
        return self._request(
            f"/manage/{self.protocol.scope_collection}",
            "GET",
            f"list-{entity}",
            query={"pagesize": str(page_size), "nextpage": next_page},
        )

    def get_organization(self, organization_id: Optional[str] = None) -> Dict[str, Any]:
        """Without an id the server returns the caller's own organization."""
        entity = self.protocol.scope_entity
        path = f"/manage/{entity}"
        if organization_id is not None:
            path += f"/{_enc(organization_id)}"
        return self._request(path, "GET", f"get-{entity}")

    def create_organization(self, data: Dict[str, Any]) -> Dict[str, Any]:
        entity = self.protocol.scope_entity
        return self._request(f"/manage/{entity}", "POST", f"create-{entity}", data)

    def update_organization(self, organization_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        entity = self.protocol.scope_entity
        return self._request(f"/manage/{entity}/{_enc(organization_id)}", "PATCH", f"update-{entity}", data)

    def delete_organization(self, organization_id: str) -> None:
        entity = self.protocol.scope_entity
        return self._request(f"/manage/{entity}/{_enc(organization_id)}", "DELETE", f"delete-{entity}")

    get_customers = get_organizations
    get_customer = get_organization
    create_customer = create_organization
    update_customer = update_organization
    delete_customer = delete_organization

    # ------------------------------------------------------------------ #
    # Accounts
    # ------------------------------------------------------------------ #

    def get_accounts(self, page_size: int, next_page: Optional[str] = None) -> Dict[str, Any]:
        return self._list("/accounts", "list-account", page_size, next_page)

    def get_account(self, account_id: str) -> Dict[str, Any]:
        return self._request(self.protocol.scoped(f"/account/{_enc(account_id)}"), "GET", "get-account")

    def create_account(self, account: Dict[str, Any]) -> Dict[str, Any]:
        """The response includes the generated secret for client accounts."""
        return self._request(self.protocol.scoped("/account"), "POST", "create-account", account)

    def update_account(self, account_id: str, account: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(self.protocol.scoped(f"/account/{_enc(account_id)}"), "PATCH", "update-account", account)

    def delete_account(self, account_id: str) -> None:
        return self._request(self.protocol.scoped(f"/account/{_enc(account_id)}"), "DELETE", "delete-account")

    # ------------------------------------------------------------------ #
    # Templates
    # ------------------------------------------------------------------ #

    def get_templates(self, page_size: int, next_page: Optional[str] = None) -> Dict[str, Any]:
        return self._list("/templates", "list-template", page_size, next_page)

    def _template_path(self, template_id: str, locale: Optional[str]) -> str:
        # legacy templates are addressed by slug, optionally per locale
        path = f"/template/{_enc(template_id)}"
        if locale:
            path += f"/{_enc(locale)}"
        return self.protocol.scoped(path)

    def get_template(self, template_id: str, locale: Optional[str] = None) -> Dict[str, Any]:
        return self._request(self._template_path(template_id, locale), "GET", "get-template")

    def create_template(self, template: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(self.protocol.scoped("/template"), "POST", "create-template", template)

    def update_template(
        self, template_id: str, template: Dict[str, Any], locale: Optional[str] = None
    ) -> Dict[str, Any]:
        return self._request(self._template_path(template_id, locale), "PATCH", "update-template", template)

    def delete_template(self, template_id: str, locale: Optional[str] = None) -> None:
        return self._request(self._template_path(template_id, locale), "DELETE", "delete-template")

    # ------------------------------------------------------------------ #
    # Senders
    # ------------------------------------------------------------------ #

    def get_senders(self, page_size: int, next_page: Optional[str] = None) -> Dict[str, Any]:
        return self._list("/senders", "list-sender", page_size, next_page)

    def get_sender(self, sender_id: str) -> Dict[str, Any]:
        return self._request(self.protocol.scoped(f"/sender/{_enc(sender_id)}"), "GET", "get-sender")

    def create_sender(self, sender: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(self.protocol.scoped("/sender"), "POST", "create-sender", sender)

    def update_sender(self, sender_id: str, sender: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(self.protocol.scoped(f"/sender/{_enc(sender_id)}"), "PATCH", "update-sender", sender)

    def delete_sender(self, sender_id: str) -> None:
        return self._request(self.protocol.scoped(f"/sender/{_enc(sender_id)}"), "DELETE", "delete-sender")

    # ------------------------------------------------------------------ #
    # App keys
    # ------------------------------------------------------------------ #

    def get_app_keys(self, page_size: int, next_page: Optional[str] = None) -> Dict[str, Any]:
        return self._list("/appkeys", "list-appkey", page_size, next_page)

    def get_app_key(self, app_key_id: str) -> Dict[str, Any]:
        return self._request(self.protocol.scoped(f"/appkey/{_enc(app_key_id)}"), "GET", "get-appkey")

    def create_app_key(self, app_key: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(self.protocol.scoped("/appkey"), "POST", "create-appkey", app_key)

    def update_app_key(self, app_key_id: str, app_key: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(self.protocol.scoped(f"/appkey/{_enc(app_key_id)}"), "PATCH", "update-appkey", app_key)

    def delete_app_key(self, app_key_id: str) -> None:
        return self._request(self.protocol.scoped(f"/appkey/{_enc(app_key_id)}"), "DELETE", "delete-appkey")

    # ------------------------------------------------------------------ #
    # Blocks
    # ------------------------------------------------------------------ #

    def get_blocks(self, page_size: int, next_page: Optional[str] = None) -> Dict[str, Any]:
        return self._list("/blocks", "list-block", page_size, next_page)

    def get_block(self, block_id: str) -> Dict[str, Any]:
        return self._request(self.protocol.scoped(f"/block/{_enc(block_id)}"), "GET", "get-block")

    def create_block(self, block: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(self.protocol.scoped("/block"), "POST", "create-block", block)

    def delete_block(self, block_id: str) -> None:
        self._request(self.protocol.scoped(f"/block/{_enc(block_id)}"), "DELETE", "delete-block")
