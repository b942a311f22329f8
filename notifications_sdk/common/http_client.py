# notifications_sdk/common/http_client.py
from __future__ import annotations

import threading

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import settings

_SESSION: requests.Session | None = None
_SESSION_LOCK = threading.Lock()


def build_session(
    pool_connections: int | None = None,
    pool_maxsize: int | None = None,
    retries: int | Retry = 0,
) -> requests.Session:
    """New session with a pooled adapter mounted for http and https.

    Pool sizes default to HTTP_POOL_CONN / HTTP_POOL_MAX. ``retries`` is
    handed to the adapter as is, so callers wanting retries on idempotent
    calls can pass a ``Retry`` and give the session to a client.
    """
    adapter = HTTPAdapter(
        pool_connections=pool_connections or settings.http_pool_conn,
        pool_maxsize=pool_maxsize or settings.http_pool_max,
        max_retries=retries,
    )
    s = requests.Session()
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


def get_session() -> requests.Session:
    """Shared session used by every client that was not handed its own."""
    global _SESSION
    if _SESSION is None:
        with _SESSION_LOCK:
            if _SESSION is None:
                # one attempt per call
                _SESSION = build_session(retries=0)
    return _SESSION


def close_session() -> None:
    global _SESSION
    with _SESSION_LOCK:
        if _SESSION is not None:
            _SESSION.close()
        _SESSION = None
