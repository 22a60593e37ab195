"""SMTP notifier behaviour with the transport patched out."""
import aiosmtplib
import pytest
from fastapi.testclient import TestClient

import main
from notifier import SmtpNotifier
from schemas import OutboundMessage
from settings import Settings

MESSAGE = OutboundMessage(recipient="jane@x.com", subject="New Order", body="<h2>New Order</h2>")


@pytest.fixture
def smtp_settings() -> Settings:
    return Settings(_env_file=None, EMAIL_USER="shop@x.com", EMAIL_PASS="secret", SMTP_HOST="mail.test")


@pytest.fixture
def sent(monkeypatch):
    """Replace aiosmtplib.send with a recorder and return the recorded calls."""

    calls = []

    async def fake_send(message, **options):
        calls.append((message, options))

    monkeypatch.setattr(aiosmtplib, "send", fake_send)
    return calls


class FakeSMTP:
    def __init__(self, login_error=None, **options):
        self.options = options
        self.login_error = login_error

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def login(self, username, password):
        if self.login_error:
            raise self.login_error


def test_build_email_headers_and_html_body(smtp_settings):
    email = SmtpNotifier(smtp_settings).build_email(MESSAGE)

    assert email["From"] == "shop@x.com"
    assert email["To"] == "jane@x.com"
    assert email["Subject"] == "New Order"
    assert email.get_content_type() == "text/html"
    assert "<h2>New Order</h2>" in email.get_content()


async def test_send_returns_true_on_delivery(smtp_settings, sent):
    assert await SmtpNotifier(smtp_settings).send(MESSAGE) is True

    email, options = sent[0]
    assert email["To"] == "jane@x.com"
    assert options["hostname"] == "mail.test"
    assert options["start_tls"] is True
    assert options["username"] == "shop@x.com"


async def test_send_returns_false_on_smtp_error(smtp_settings, monkeypatch, caplog):
    async def refusing_send(message, **options):
        raise aiosmtplib.SMTPRecipientsRefused([])

    monkeypatch.setattr(aiosmtplib, "send", refusing_send)
    caplog.set_level("ERROR")

    assert await SmtpNotifier(smtp_settings).send(MESSAGE) is False
    assert "jane@x.com" in caplog.text


async def test_send_returns_false_when_message_cannot_be_built(smtp_settings, monkeypatch):
    """Unsendable messages (no sender, bad headers) are failures, not exceptions."""

    async def no_sender(message, **options):
        raise ValueError("No From header provided in message")

    monkeypatch.setattr(aiosmtplib, "send", no_sender)

    assert await SmtpNotifier(smtp_settings).send(MESSAGE) is False


async def test_verify_succeeds(smtp_settings, monkeypatch, caplog):
    monkeypatch.setattr(aiosmtplib, "SMTP", FakeSMTP)
    caplog.set_level("INFO")

    assert await SmtpNotifier(smtp_settings).verify() is True
    assert "ready to take our messages" in caplog.text


async def test_verify_fails_on_bad_login(smtp_settings, monkeypatch, caplog):
    error = aiosmtplib.SMTPAuthenticationError(535, "bad credentials")
    monkeypatch.setattr(aiosmtplib, "SMTP", lambda **options: FakeSMTP(login_error=error, **options))
    caplog.set_level("ERROR")

    assert await SmtpNotifier(smtp_settings).verify() is False
    assert "Error with mailer configuration" in caplog.text


class CountingNotifier(SmtpNotifier):
    def __init__(self, settings):
        super().__init__(settings)
        self.verifications = 0

    async def verify(self):
        self.verifications += 1
        return True


def test_startup_verifies_notifier_once(smtp_settings, monkeypatch):
    notifier = CountingNotifier(smtp_settings)
    monkeypatch.setattr(main, "get_notifier", lambda: notifier)

    with TestClient(main.app) as client:
        client.get("/api/health")
        client.get("/api/health")

    assert notifier.verifications == 1
