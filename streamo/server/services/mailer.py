"""
Outgoing Mail Service.

Sends HTML + plain-text mail through the configured SMTP server. ``smtplib`` is
blocking, so messages are sent from the thread pool.
"""

from __future__ import annotations

import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional

from starlette.concurrency import run_in_threadpool

from streamo.core.errors import ServiceUnavailableError, UpstreamError
from streamo.core.logging_config import get_logger
from streamo.core.models.domain.enums import RightsRequestType
from streamo.core.models.io.royalties import RightsRequest
from streamo.core.monitoring import log_error
from streamo.server.core.config import SMTPConfig, settings

logger = get_logger(__name__)


def build_message(sender: str, recipient: str, subject: str, text: str, html: str, reply_to: Optional[str] = None):
    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = sender
    message["To"] = recipient
    if reply_to:
        message["Reply-To"] = reply_to
    message.attach(MIMEText(text, "plain"))
    message.attach(MIMEText(html, "html"))
    return message


def _deliver(config: SMTPConfig, recipient: str, message: MIMEMultipart) -> None:
    sender = config.sender or config.username
    if config.use_ssl:
        with smtplib.SMTP_SSL(config.host, config.port, context=ssl.create_default_context()) as server:
            if config.username and config.password:
                server.login(config.username, config.password)
            server.sendmail(sender, [recipient], message.as_string())
    else:
        with smtplib.SMTP(config.host, config.port) as server:
            server.starttls(context=ssl.create_default_context())
            if config.username and config.password:
                server.login(config.username, config.password)
            server.sendmail(sender, [recipient], message.as_string())


async def send_mail(recipient: str, subject: str, text: str, html: str, reply_to: Optional[str] = None) -> None:
    """
    Send one message.

    Raises:
        ServiceUnavailableError: SMTP is not configured (503)
        UpstreamError: The SMTP server refused or failed (502)
    """
    config = settings.smtp
    if not config.is_configured:
        raise ServiceUnavailableError("Email service is not configured")

    message = build_message(config.sender or config.username, recipient, subject, text, html, reply_to)
    try:
        await run_in_threadpool(_deliver, config, recipient, message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send mail '{subject}' to {recipient}: {e}")
        log_error("SMTPError", str(e), {"recipient": recipient, "subject": subject})
        raise UpstreamError("Failed to send email") from e
    logger.info(f"Sent mail '{subject}' to {recipient}")


def platform_display_name(platform: str) -> str:
    """Capitalise a platform name; ``youtube`` is spelled ``YouTube``."""
    value = platform.strip()
    if value.lower() == "youtube":
        return "YouTube"
    return value[:1].upper() + value[1:]


def rights_request_subject(request: RightsRequest) -> str:
    if request.request_type == RightsRequestType.whitelist:
        return f"Whitelist Request for {request.label_name}"
    return f"Claim Release Request for {request.label_name}"


async def send_rights_request(request: RightsRequest, requested_by: str) -> str:
    """Forward a whitelist or claim request to the rights mailbox and return the subject."""
    subject = rights_request_subject(request)
    platform = platform_display_name(request.platform)
    kind = "Whitelist" if request.request_type == RightsRequestType.whitelist else "Claim Release"

    text = (
        f"{kind} request\n\n"
        f"Platform: {platform}\n"
        f"Email: {request.email}\n"
        f"Label: {request.label_name}\n"
        f"Link: {request.link_url}\n"
        f"Requested by: {requested_by}\n"
    )
    html = (
        f"<h2>{escape(kind)} request</h2>"
        "<table>"
        f"<tr><td><strong>Platform</strong></td><td>{escape(platform)}</td></tr>"
        f"<tr><td><strong>Email</strong></td><td>{escape(request.email)}</td></tr>"
        f"<tr><td><strong>Label</strong></td><td>{escape(request.label_name)}</td></tr>"
        f"<tr><td><strong>Link</strong></td><td><a href=\"{escape(request.link_url)}\">{escape(request.link_url)}</a></td></tr>"
        f"<tr><td><strong>Requested by</strong></td><td>{escape(requested_by)}</td></tr>"
        "</table>"
    )
    await send_mail(settings.smtp.rights_mailbox, subject, text, html, reply_to=request.email)
    return subject


async def send_reset_code(recipient: str, code: str, expire_minutes: int) -> None:
    """Mail a password reset code."""
    subject = "Your password reset code"
    text = f"Your password reset code is {code}. It expires in {expire_minutes} minutes."
    html = (
        f"<p>Your password reset code is <strong>{escape(code)}</strong>.</p>"
        f"<p>It expires in {expire_minutes} minutes.</p>"
    )
    await send_mail(recipient, subject, text, html)
