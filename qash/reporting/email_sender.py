import smtplib
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from qash.config.settings import Settings
from qash.logging.logger import Log
from qash.reporting.exceptions import EmailDeliveryError


class EmailSender:
    """Sends analysis reports over SMTP using the configured account."""

    def __init__(self, settings: Settings, timeout_seconds: float = 30.0) -> None:
        self._host = settings.smtp_host
        self._port = settings.smtp_port
        self._user = settings.smtp_user
        self._password = settings.smtp_password
        self._sender = settings.smtp_from
        self._use_tls = settings.smtp_use_tls
        self._timeout = timeout_seconds

    def build_message(
        self,
        *,
        to: str,
        subject: str,
        message: str,
        attachment_name: str,
        attachment_text: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("mixed")
        msg["From"] = self._sender
        msg["To"] = to
        msg["Subject"] = subject

        body = MIMEMultipart("alternative")
        body.attach(MIMEText(message, "plain", "utf-8"))
        body.attach(MIMEText(self._html_body(message), "html", "utf-8"))
        msg.attach(body)

        attachment = MIMEApplication(attachment_text.encode("utf-8"), Name=attachment_name)
        attachment["Content-Disposition"] = f'attachment; filename="{attachment_name}"'
        msg.attach(attachment)
        return msg

    def send_report(
        self,
        *,
        to: str,
        subject: str,
        message: str,
        attachment_name: str,
        attachment_text: str,
    ) -> None:
        """Deliver a report email with the text report attached.

        Raises:
            EmailDeliveryError: on any SMTP or connection failure.
        """
        msg = self.build_message(
            to=to,
            subject=subject,
            message=message,
            attachment_name=attachment_name,
            attachment_text=attachment_text,
        )
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
                if self._use_tls:
                    server.starttls()
                if self._user:
                    server.login(self._user, self._password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            Log.error(f"Error sending email: {exc}", to=to)
            raise EmailDeliveryError(f"Failed to send email: {exc}") from exc
        Log.info(f"Email sent successfully to: {to}")

    @staticmethod
    def _html_body(message: str) -> str:
        return (
            '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
            '<h2 style="color: #3B82F6;">Qash Financial Analysis Report</h2>'
            f'<pre style="white-space: pre-wrap;">{escape(message)}</pre>'
            '<hr style="border: 1px solid #E5E7EB; margin: 20px 0;">'
            '<p style="color: #6B7280; font-size: 14px;">'
            "Please find the detailed financial analysis report attached."
            "</p></div>"
        )
