import pathlib
import pytest

import notifications_sdk.common.http_client as http_client


# ----------------------------
#  Auto-mark tests by folder
# ----------------------------

def pytest_collection_modifyitems(config, items):
    for item in items:
        p = pathlib.Path(str(item.fspath)).as_posix()
        if "/tests/unit/" in p:
            item.add_marker(pytest.mark.unit)
        elif "/tests/component/" in p:
            item.add_marker(pytest.mark.component)


@pytest.fixture(autouse=True)
def reset_http_session_singleton():
    http_client._SESSION = None
    yield
    http_client._SESSION = None


# ----------------------------
#  ENV setup
# ----------------------------

@pytest.fixture(autouse=True)
def env_setup(monkeypatch):
    # ensure tests never use real endpoints or credentials
    for var in (
        "NOTIFICATIONS_BASE_URL",
        "NOTIFICATIONS_MANAGE_BASE_URL",
        "NOTIFICATIONS_MESSAGE_BASE_URL",
        "NOTIFICATIONS_AUTH_TOKEN",
        "NOTIFICATIONS_ORGANIZATION_ID",
        "NOTIFICATIONS_PROTOCOL",
        "NOTIFICATIONS_HTTP_TIMEOUT_S",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture()
def no_network(monkeypatch):
    """Fails the test if anything reaches the real shared session."""

    def _boom(*args, **kwargs):
        raise AssertionError("Unexpected real HTTP request")

    monkeypatch.setattr("requests.Session.request", _boom, raising=True)
