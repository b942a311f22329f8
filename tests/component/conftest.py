import json as _json

import pytest


@pytest.fixture()
def fake_api(monkeypatch):
    """Routes requests.Session.request to canned responses.

    Component tests go through the real shared session (get_session), so the
    whole path from client method to requests.Response is exercised.
    Usage: fake_api.add("GET", url, json=..., status_code=...).
    """
    import requests
    from requests.structures import CaseInsensitiveDict

    class _FakeApi:
        def __init__(self):
            self._routes = {}  # (method, url) -> queued (status_code, text), each served once
            self.calls = []

        def add(self, method, url, json=None, status_code=200, text=None):
            if text is None:
                text = "" if json is None else _json.dumps(json)
            self._routes.setdefault((method.upper(), url), []).append((status_code, text))

        def request(self, session, method, url, **kwargs):
            m = (method or "").upper()
            self.calls.append({"method": m, "url": url, **kwargs})
            queue = self._routes.get((m, url))
            if not queue:
                raise AssertionError(f"Unexpected {m} {url!r} in fake_api")
            status, text = queue.pop(0)

            resp = requests.Response()
            resp.status_code = status
            resp.reason = "OK" if status == 200 else "Error"
            resp.url = url
            resp.encoding = "utf-8"
            resp.headers = CaseInsensitiveDict({"Content-Type": "application/json"})
            resp._content = text.encode("utf-8")
            return resp

    api = _FakeApi()
    monkeypatch.setattr(
        requests.Session,
        "request",
        lambda self, method, url, **kw: api.request(self, method, url, **kw),
        raising=True,
    )
    return api
