"""SMTP delivery for email campaigns."""
import html
import re
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

import structlog

logger = structlog.get_logger()

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_email(address: str | None) -> bool:
    return bool(address) and bool(EMAIL_RE.match(address.strip()))


@dataclass(frozen=True)
class SmtpConfig:
    """SMTP relay settings."""

    host: str = ""
    port: int = 587
    user: str = ""
    password: str = ""
    from_address: str = ""
    sender_name: str = ""
    use_tls: bool = True
    timeout: float = 30.0


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    body: str


def build_message(config: SmtpConfig, email: OutgoingEmail) -> MIMEMultipart:
    """Build a text + HTML alternative message."""
    msg = MIMEMultipart("alternative")
    msg["Subject"] = email.subject
    msg["From"] = formataddr((config.sender_name, config.from_address))
    msg["To"] = email.to
    html_body = "<html><body>" + html.escape(email.body).replace("\n", "<br>\n") + "</body></html>"
    msg.attach(MIMEText(email.body, "plain", "utf-8"))
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    return msg


class SmtpMailer:
    """Sends a burst of emails over a single SMTP session."""

    def __init__(self, config: SmtpConfig, smtp_factory=smtplib.SMTP):
        self.config = config
        self._smtp_factory = smtp_factory

    @property
    def is_configured(self) -> bool:
        return bool(self.config.host and self.config.from_address)

    def _open(self):
        server = self._smtp_factory(
            self.config.host, self.config.port, timeout=self.config.timeout
        )
        try:
            if self.config.use_tls:
                server.starttls()
            if self.config.user:
                server.login(self.config.user, self.config.password)
        except BaseException:
            server.close()
            raise
        return server

    def send_batch(self, emails: list[OutgoingEmail]) -> list[str | None]:
        """Send every email; returns None per delivered email, else the error."""
        try:
            server = self._open()
        except smtplib.SMTPAuthenticationError as e:
            logger.error("smtp_auth_failed", host=self.config.host)
            return [f"Failed to send to {m.to}: SMTP authentication failed ({e.smtp_code})" for m in emails]
        except (smtplib.SMTPException, OSError) as e:
            logger.error("smtp_connect_failed", host=self.config.host, error=str(e))
            return [f"Failed to send to {m.to}: {e}" for m in emails]

        results: list[str | None] = []
        with server:
            for email in emails:
                msg = build_message(self.config, email)
                try:
                    server.sendmail(self.config.from_address, [email.to], msg.as_string())
                    results.append(None)
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning("email_send_failed", to=email.to, error=str(e))
                    results.append(f"Failed to send to {email.to}: {e}")
        return results
