import pytest

from notifications_sdk.adapters.message_client import NotificationsMessageClient
from notifications_sdk.common.config import Settings
from notifications_sdk.common.errors import ArgumentError, FetchError, ResponseError
from notifications_sdk.common.protocol import LEGACY
from notifications_sdk.domain.models import EmailMessage, SmsMessage, SmsRecipient
from tests.helpers.http_client import DummyResp, DummySession, connection_error


BASE = "https://msg.example.com"


def make_client(*responses, organization_id="org-1", **kwargs):
    sess = DummySession(*responses)
    client = NotificationsMessageClient(BASE, "tok", organization_id, session=sess, **kwargs)
    return client, sess


@pytest.mark.parametrize(
    "base_url, token, org, expected",
    [
        ("not-a-url", "tok", "org-1", "baseUrl is invalid."),
        (BASE, "", "org-1", "authorizationToken is invalid."),
        (BASE, None, "org-1", "authorizationToken is invalid."),
        (BASE, "tok", "", "organizationID is invalid."),
        (BASE, "tok", None, "organizationID is invalid."),
    ],
)
def test_constructor_validation(base_url, token, org, expected):
    with pytest.raises(ArgumentError) as e:
        NotificationsMessageClient(base_url, token, org)
    assert str(e.value) == expected


def test_send_email_posts_to_organization_path():
    client, sess = make_client(DummyResp(payload={"messageID": "m-1"}))

    result = client.send_email(
        {
            "template_slug": "welcome",
            "recipient": {"name": "Jan", "email": "jan@example.com"},
            "merge_values": {"first": "Jan"},
            "sender_id": "s-1",
        }
    )

    assert result == {"messageID": "m-1"}
    call = sess.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == f"{BASE}/message/org-1/email"
    assert call["headers"]["Accept"] == "application/vnd.notification.create-email.v1+json"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["headers"]["Authorization"] == "Bearer tok"
    assert sess.json_body() == {
        "templateSlug": "welcome",
        "recipient": {"name": "Jan", "email": "jan@example.com"},
        "mergeValues": {"first": "Jan"},
        "senderID": "s-1",
    }


def test_send_sms_accepts_model_and_encodes_organization():
    client, sess = make_client(DummyResp(payload={"messageID": "m-2"}), organization_id="org/2")
    msg = SmsMessage(template_slug="otp", recipient=SmsRecipient("+48123456789"), metadata={"k": "v"})

    client.send_sms(msg)

    assert sess.calls[0]["url"] == f"{BASE}/message/org%2F2/sms"
    assert sess.calls[0]["headers"]["Accept"] == "application/vnd.notification.create-sms.v1+json"
    assert sess.json_body() == {
        "templateSlug": "otp",
        "recipient": {"phone": "+48123456789"},
        "metadata": {"k": "v"},
    }


def test_message_client_never_calls_info():
    client, sess = make_client(DummyResp(payload={"messageID": "m-1"}))
    client.send_sms({"template_slug": "otp", "recipient": "+48123"})
    assert sess.urls() == [f"{BASE}/message/org-1/sms"]


@pytest.mark.parametrize(
    "message",
    [
        "not a message",
        {"template_slug": "x"},
        {"template_slug": "x", "recipient": {"name": "no email"}},
        {"template_slug": "", "recipient": {"email": "a@b.c"}},
        {"template_slug": "x", "recipient": {"email": "a@b.c"}, "unknown_field": 1},
        {"template_slug": "x", "recipient": {"email": "a@b.c"}, "merge_values": ["not", "a", "map"]},
    ],
)
def test_invalid_email_messages_are_rejected_before_sending(message):
    client, sess = make_client()
    with pytest.raises(ArgumentError):
        client.send_email(message)
    assert sess.calls == []


def test_send_email_rejects_sms_message():
    client, _ = make_client()
    with pytest.raises(ArgumentError):
        client.send_email(SmsMessage(template_slug="otp", recipient="+48123"))


def test_errors_propagate():
    client, _ = make_client(
        DummyResp(status_code=400, payload={"error": "template not found"}),
        connection_error(),
    )

    with pytest.raises(ResponseError) as e:
        client.send_sms({"template_slug": "missing", "recipient": "+48123"})
    assert e.value.message == "template not found"

    with pytest.raises(FetchError):
        client.send_sms({"template_slug": "otp", "recipient": "+48123"})


def test_set_authorization_token():
    client, sess = make_client(DummyResp(payload={}))
    client.set_authorization_token("tok-2")
    client.send_sms({"template_slug": "otp", "recipient": "+48123"})
    assert sess.calls[0]["headers"]["Authorization"] == "Bearer tok-2"


def test_legacy_protocol_derives_organization_from_token():
    sess = DummySession(DummyResp(payload={"MessageID": "m-1"}))
    client = NotificationsMessageClient(BASE + "/", "raw-key", protocol=LEGACY, session=sess)

    client.send_email(EmailMessage(template_slug="welcome", recipient={"email": "a@example.com"}))

    call = sess.calls[0]
    assert call["url"] == f"{BASE}/message/email"
    assert call["headers"]["Authorization"] == "raw-key"
    assert call["headers"]["Content-Type"] == "application/vnd.notification.create-email.v1+json"
    assert sess.json_body() == {
        "TemplateSlug": "welcome",
        "Recipient": {"Name": "", "Email": "a@example.com"},
    }
    assert client.organization_id is None


def test_from_settings_prefers_message_base_url():
    cfg = Settings(
        base_url="https://api.example.com",
        message_base_url="https://msg.example.com/",
        auth_token="tok",
        organization_id="org-env",
        protocol="current",
        http_timeout_s=3.0,
    )
    sess = DummySession(DummyResp(payload={}))

    client = NotificationsMessageClient.from_settings(cfg, session=sess)
    client.send_sms({"template_slug": "otp", "recipient": "+48123"})

    assert client.get_base_url() == "https://msg.example.com"
    assert client.organization_id == "org-env"
    assert sess.calls[0]["timeout"] == 3.0


def test_from_settings_explicit_organization_wins():
    cfg = Settings(
        base_url="https://api.example.com",
        message_base_url="",
        auth_token="tok",
        organization_id="org-env",
        protocol="current",
    )
    client = NotificationsMessageClient.from_settings(cfg, organization_id="org-x")
    assert client.organization_id == "org-x"
    assert client.get_base_url() == "https://api.example.com"
