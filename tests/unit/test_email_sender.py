import smtplib
from unittest.mock import patch

import pytest

from qash.config.settings import Settings
from qash.reporting.email_sender import EmailSender
from qash.reporting.exceptions import EmailDeliveryError


def _sender(**overrides: object) -> EmailSender:
    settings = Settings(
        _env_file=None,
        smtp_host="smtp.test",
        smtp_port=2525,
        smtp_user="bot",
        smtp_password="pw",
        **overrides,
    )
    return EmailSender(settings)


def _send(sender: EmailSender) -> None:
    sender.send_report(
        to="cfo@example.com",
        subject="Q1 report",
        message="See <attached>",
        attachment_name="q1_analysis.txt",
        attachment_text="REPORT BODY",
    )


class TestEmailSender:
    def test_sends_with_starttls_and_login(self) -> None:
        with patch("qash.reporting.email_sender.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            _send(_sender())

        smtp_cls.assert_called_once_with("smtp.test", 2525, timeout=30.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("bot", "pw")
        message = server.send_message.call_args.args[0]
        assert message["To"] == "cfo@example.com"
        assert message["Subject"] == "Q1 report"
        assert message["From"] == "Qash Financial Analysis <noreply@qash.com>"

    def test_tls_can_be_disabled(self) -> None:
        with patch("qash.reporting.email_sender.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            _send(_sender(smtp_use_tls=False))
        server.starttls.assert_not_called()

    def test_message_has_text_html_and_attachment(self) -> None:
        message = _sender().build_message(
            to="a@b.c",
            subject="s",
            message="Hello <team>",
            attachment_name="x_analysis.txt",
            attachment_text="REPORT BODY",
        )
        attachments = [part for part in message.walk() if part.get_filename()]
        assert [part.get_filename() for part in attachments] == ["x_analysis.txt"]
        assert attachments[0].get_payload(decode=True) == b"REPORT BODY"
        html = next(part for part in message.walk() if part.get_content_type() == "text/html")
        assert "Hello &lt;team&gt;" in html.get_payload(decode=True).decode()

    def test_smtp_failure_is_wrapped(self) -> None:
        with patch("qash.reporting.email_sender.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            server.send_message.side_effect = smtplib.SMTPRecipientsRefused({})
            with pytest.raises(EmailDeliveryError, match="Failed to send email"):
                _send(_sender())

    def test_connection_failure_is_wrapped(self) -> None:
        with patch(
            "qash.reporting.email_sender.smtplib.SMTP", side_effect=ConnectionRefusedError("refused")
        ):
            with pytest.raises(EmailDeliveryError, match="refused"):
                _send(_sender())
