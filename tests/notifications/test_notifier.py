import smtplib

import pytest

from office_attendance.core.exceptions import NotificationDeliveryError
from office_attendance.notifications import notifier as notifier_module
from office_attendance.notifications.notifier import OutboxNotifier, SMTPNotifier, SMTPSettings, normalize_recipients


class FakeSMTP:
    instances = []
    fail_times = 0

    def __init__(self, host, port, timeout):
        self.host = host
        self.port = port
        self.messages = []
        self.logged_in = None
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, msg):
        if FakeSMTP.fail_times > 0:
            FakeSMTP.fail_times -= 1
            raise smtplib.SMTPServerDisconnected("gone")
        self.messages.append(msg)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_times = 0
    monkeypatch.setattr(notifier_module.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(notifier_module.time, "sleep", lambda _: None)
    return FakeSMTP


def test_normalize_recipients_dedupes_and_drops_blanks():
    assert normalize_recipients("a@x.com") == ["a@x.com"]
    assert normalize_recipients(["a@x.com", " ", "a@x.com", "b@x.com"]) == ["a@x.com", "b@x.com"]


def test_smtp_notifier_sends_html_mail(fake_smtp):
    n = SMTPNotifier(SMTPSettings(host="smtp.example.com", user="bot@example.com", password="pw"))

    n.send(["ada@example.com", "hr@example.com"], "Attendance Warning", "<p>hi</p>")

    smtp = fake_smtp.instances[0]
    assert smtp.logged_in == ("bot@example.com", "pw")
    msg = smtp.messages[0]
    assert msg["To"] == "ada@example.com, hr@example.com"
    assert msg["Subject"] == "Attendance Warning"
    assert "bot@example.com" in msg["From"]


def test_smtp_notifier_retries_then_succeeds(fake_smtp):
    fake_smtp.fail_times = 1

    SMTPNotifier(SMTPSettings(host="smtp.example.com"), attempts=2).send("a@x.com", "s", "b")

    assert len(fake_smtp.instances) == 2


def test_smtp_notifier_raises_after_last_attempt(fake_smtp):
    fake_smtp.fail_times = 5

    with pytest.raises(NotificationDeliveryError):
        SMTPNotifier(SMTPSettings(host="smtp.example.com"), attempts=2).send("a@x.com", "s", "b")


def test_outbox_requires_a_recipient():
    with pytest.raises(NotificationDeliveryError):
        OutboxNotifier().send([], "s", "b")


def test_outbox_keeps_only_the_most_recent_messages():
    outbox = OutboxNotifier(limit=3)

    for i in range(5):
        outbox.send("a@x.com", f"mail {i}", "b")

    assert [m["subject"] for m in outbox.sent] == ["mail 2", "mail 3", "mail 4"]
