import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import parseaddr

from backend.core import config

logger = logging.getLogger(__name__)


class Mailer:
    """Sends HTML mail through the configured SMTP server."""

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool | None = None,
        from_address: str | None = None,
    ) -> None:
        self.host = host or config.MAIL_HOST
        self.port = port or config.MAIL_PORT
        self.username = config.MAIL_USER if username is None else username
        self.password = config.MAIL_PASS if password is None else password
        self.use_tls = config.MAIL_USE_TLS if use_tls is None else use_tls
        self.from_address = from_address or config.MAIL_FROM

    def build_message(self, to: str, subject: str, html: str) -> MIMEMultipart:
        msg = MIMEMultipart('alternative')
        msg['From'] = self.from_address
        msg['To'] = to
        msg['Subject'] = subject
        msg.attach(MIMEText(html, 'html', 'utf-8'))
        return msg

    def send(self, to: str, subject: str, html: str) -> None:
        msg = self.build_message(to, subject, html)

        server = smtplib.SMTP(self.host, self.port, timeout=30)
        try:
            if self.use_tls:
                server.starttls(context=ssl.create_default_context())
            if self.username:
                server.login(self.username, self.password)
            server.sendmail(parseaddr(self.from_address)[1], [parseaddr(to)[1]], msg.as_string())
        finally:
            server.quit()

        logger.info('Mail "%s" sent to %s', subject, parseaddr(to)[1])
