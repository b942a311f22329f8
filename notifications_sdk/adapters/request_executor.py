"""Request execution shared by the manage and message clients.

One executor instance holds the per-client connection state (base URL,
token, tenant scope) and turns a request description into either the parsed
JSON payload or one of the errors from ``common.errors``.
"""

from __future__ import annotations

import json
import threading
from typing import Any, Mapping, Optional
from urllib.parse import quote, urlencode, urlsplit

import requests

from ..common.errors import (
    ArgumentError,
    AuthorizationError,
    FetchError,
    InitError,
    NotFoundError,
    ResponseError,
    ResponseErrorCause,
)
from ..common.http_client import get_session
from ..common.logging import logger
from ..common.logging_utils import redact_headers, shorten_body
from ..common.protocol import CURRENT, SCOPE_PLACEHOLDER, ProtocolVersion

INFO_PATH = "/manage/info"


def is_http_url(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def normalize_base_url(base_url: Any) -> str:
    """Validates an absolute http(s) URL and strips one trailing slash."""
    if isinstance(base_url, str) and base_url.endswith("/"):
        base_url = base_url[:-1]
    if not is_http_url(base_url):
        raise ArgumentError("baseUrl is invalid.")
    return base_url


def build_query(params: Optional[Mapping[str, Any]]) -> str:
    if not params:
        return ""
    cleaned = {k: str(v) for k, v in params.items() if v is not None}
    if not cleaned:
        return ""
    return "?" + urlencode(cleaned)


def serialize_body(body: Any) -> Optional[bytes]:
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body, ensure_ascii=False).encode("utf-8")


class RequestExecutor:
    def __init__(
        self,
        base_url: str,
        authorization_token: str,
        *,
        protocol: ProtocolVersion = CURRENT,
        scope_id: Optional[str] = None,
        info_path: Optional[str] = INFO_PATH,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = normalize_base_url(base_url)
        self.authorization_token = authorization_token
        self.protocol = protocol
        self.info_path = info_path
        self.timeout = timeout
        self._session = session

        self.scope_id: Optional[str] = None
        self.init_complete = False
        self._scope_lock = threading.Lock()
        if scope_id:
            self.set_scope(scope_id)

    # ------------------------------------------------------------------ #
    # Tenant scope
    # ------------------------------------------------------------------ #

    def set_scope(self, scope_id: str) -> None:
        if not isinstance(scope_id, str) or not scope_id.strip():
            raise ArgumentError(f"{self.protocol.scope_entity}ID is invalid.")
        self.scope_id = scope_id
        self.init_complete = True

    def clear_scope(self) -> None:
        self.scope_id = None
        self.init_complete = False

    def ensure_scope(self) -> str:
        """Returns the tenant id, looking it up from the info endpoint on first use.

        Concurrent callers on a fresh client wait for the one lookup in flight
        instead of sending their request without a tenant id.
        """
        scope_id = self.scope_id
        if self.init_complete and scope_id:
            return scope_id

        with self._scope_lock:
            if self.init_complete and self.scope_id:
                return self.scope_id
            scope_id = self._lookup_scope()
            self.set_scope(scope_id)

        logger.debug({"notifications": "init_ok", self.protocol.scope_entity: scope_id})
        return scope_id

    def _lookup_scope(self) -> str:
        try:
            if not self.info_path:
                raise ArgumentError("No tenant id configured and no info endpoint to look it up.")
            info = self.execute(self.info_path, "GET", "get-info")
            scope_id = self.protocol.scope_id_from_info(info)
            if not scope_id or not scope_id.strip():
                raise ResponseError(f"Info response has no {self.protocol.scope_entity} id")
        except AuthorizationError:
            raise
        except Exception as e:
            logger.warning({"notifications": "init_failed", "error": str(e)})
            raise InitError(f"Failed to init client: {e}", cause=e) from e
        return scope_id

    # ------------------------------------------------------------------ #
    # Request
    # ------------------------------------------------------------------ #

    def _get_session(self) -> requests.Session:
        return self._session if self._session is not None else get_session()

    def execute(
        self,
        path: str,
        method: str,
        content_type_resource: str,
        body: Any = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        if SCOPE_PLACEHOLDER in path:
            path = path.replace(SCOPE_PLACEHOLDER, quote(self.ensure_scope(), safe=""))

        url = self.base_url + path + build_query(query)
        headers = self.protocol.headers(content_type_resource, self.authorization_token)
        data = serialize_body(body)

        logger.debug(
            {
                "notifications": "request",
                "method": method,
                "path": path,
                "resource": content_type_resource,
                "headers": redact_headers(headers),
            }
        )

        try:
            resp = self._get_session().request(
                method,
                url,
                headers=headers,
                data=data,
                timeout=self.timeout,
            )
            text = resp.text
        except requests.RequestException as e:
            logger.warning(
                {
                    "notifications": "fetch_error",
                    "method": method,
                    "path": path,
                    "error": str(e),
                }
            )
            raise FetchError(str(e), cause=e) from e

        return self._handle_response(resp, text, url)

    def _handle_response(self, resp: requests.Response, text: str, url: str) -> Any:
        cause = ResponseErrorCause(
            url=resp.url or url,
            redirection=bool(resp.history),
            status=resp.status_code,
            status_text=resp.reason or "",
            headers=dict(resp.headers or {}),
            body=text or "",
        )

        # API gateways answer 403 (not 401) when the authorizer rejects the token
        if resp.status_code in (401, 403):
            self._log_failure(cause)
            raise AuthorizationError("Authorization Failed", cause=cause)
        if resp.status_code == 404:
            self._log_failure(cause)
            raise NotFoundError("Resource not found", cause=cause)

        payload: Any = None
        if text:
            try:
                payload = json.loads(text)
            except ValueError:
                self._log_failure(cause)
                raise ResponseError("Invalid response content", cause=cause) from None

        if resp.status_code != 200:
            self._log_failure(cause)
            message = self.protocol.error_message(payload) or text or f"HTTP {resp.status_code}"
            raise ResponseError(message, cause=cause)

        return payload

    def _log_failure(self, cause: ResponseErrorCause) -> None:
        logger.warning(
            {
                "notifications": "response_error",
                "status": cause.status,
                "url": cause.url,
                "body": shorten_body(cause.body, max_len=200),
            }
        )
