import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

from streamhub.config import SMTP_HOST, SMTP_PORT, SMTP_USERNAME, SMTP_PASSWORD, FROM_EMAIL

logger = logging.getLogger(__name__)


def _send_email(to_email: str, subject: str, text: str) -> None:
    msg = MIMEMultipart()
    msg["From"] = FROM_EMAIL
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.attach(MIMEText(text, "plain"))

    with smtplib.SMTP(SMTP_HOST, SMTP_PORT) as server:
        server.starttls()
        if SMTP_USERNAME:
            server.login(SMTP_USERNAME, SMTP_PASSWORD)
        server.sendmail(FROM_EMAIL, to_email, msg.as_string())


def notify_creator(creator_email: str | None, creator_id: int, video_title: str, decision: str) -> None:
    """
    Tells a creator their upload was approved or rejected.

    Always logged; e-mailed only when SMTP is configured and the creator has an
    address on file.
    """
    logger.info("Notify creator %s: video %r %s", creator_id, video_title, decision)
    if not SMTP_HOST or not creator_email:
        return

    if decision == "approved":
        subject = f"Your video \"{video_title}\" is live"
        body = f"""
    Hi,

    Good news: "{video_title}" has been approved and is now visible to viewers.
    """
    else:
        subject = f"Your video \"{video_title}\" was not approved"
        body = f"""
    Hi,

    "{video_title}" did not pass review and has been removed. You are welcome
    to upload a revised version.
    """
    _send_email(creator_email, subject, body)
