import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import parseaddr

from backend.core import config
from backend.mail.templates import render_template

logger = logging.getLogger(__name__)


class Mailer:
    """Sends templated mail through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str = '',
        password: str = '',
        use_tls: bool = True,
        from_address: str = '',
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.from_address = from_address

    @classmethod
    def from_config(cls) -> 'Mailer':
        return cls(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            username=config.SMTP_USERNAME,
            password=config.SMTP_PASSWORD,
            use_tls=config.SMTP_USE_TLS,
            from_address=config.MAIL_FROM_ADDRESS,
        )

    def build_message(self, recipient: str, template_id: str, context: dict) -> MIMEMultipart:
        subject, text_body, html_body = render_template(template_id, context)

        message = MIMEMultipart('alternative')
        message['Subject'] = subject
        message['From'] = self.from_address
        message['To'] = recipient
        message.attach(MIMEText(text_body, 'plain'))
        message.attach(MIMEText(html_body, 'html'))
        return message

    def _connect(self) -> smtplib.SMTP:
        if self.port == 465:
            return smtplib.SMTP_SSL(self.host, self.port, context=ssl.create_default_context(), timeout=30)

        server = smtplib.SMTP(self.host, self.port, timeout=30)
        if self.use_tls:
            server.starttls(context=ssl.create_default_context())
        return server

    def send(self, recipient: str, template_id: str, context: dict) -> None:
        message = self.build_message(recipient, template_id, context)

        with self._connect() as server:
            if self.username:
                server.login(self.username, self.password)
            server.sendmail(parseaddr(self.from_address)[1], [parseaddr(recipient)[1]], message.as_string())

        logger.info('Sent %s mail to %s', template_id, recipient)
