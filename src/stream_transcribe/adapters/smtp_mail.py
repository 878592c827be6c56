import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.policy import SMTP

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    pass


def format_address(host: str, port: int) -> str:
    return f"{host}:{port}"


def build_message(sender: str, to: list[str], subject: str, body: str) -> EmailMessage:
    message = EmailMessage(policy=SMTP)
    message["From"] = sender
    message["To"] = ", ".join(to)
    message["Subject"] = subject
    message.set_content(body)
    return message


def send_email(
    username: str,
    password: str,
    host: str,
    port: int,
    to: list[str],
    subject: str,
    body: str,
    timeout: float = 30.0,
) -> None:
    """Submit a plain-text email through host:port, upgrading to TLS before authenticating.

    The sender address is the username.
    """
    if not to:
        raise ValueError("At least one recipient is required")

    address = format_address(host, port)
    message = build_message(username, to, subject, body)

    try:
        with smtplib.SMTP(host, port, timeout=timeout) as server:
            server.starttls(context=ssl.create_default_context())
            server.login(username, password)
            server.send_message(message, from_addr=username, to_addrs=to)
    except (smtplib.SMTPException, OSError) as exc:
        raise EmailDeliveryError(f"Failed to send email via {address}: {exc}") from exc

    logger.info("Email sent via %s to %d recipient(s)", address, len(to))
