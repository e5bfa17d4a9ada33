from __future__ import annotations

import logging
import smtplib
from datetime import date
from email.message import EmailMessage
from pathlib import Path

from .. import config
from ..config import MailSettings
from .render_pdf import date_label

logger = logging.getLogger(__name__)


def build_message(report_path: Path, report_date: date, settings: MailSettings) -> EmailMessage:
    if not report_path.exists():
        raise FileNotFoundError(f"Report not found: {report_path}")
    if not settings.bcc:
        raise ValueError("No recipients configured (EMAIL_BCC)")
    label = date_label(report_date)
    message = EmailMessage()
    message["Subject"] = f"{config.REPORT_TITLE} — {label}"
    message["From"] = settings.user
    message["Bcc"] = ", ".join(settings.bcc)
    message.set_content(f"This is all the club activities for {label}.")
    message.add_attachment(
        report_path.read_bytes(),
        maintype="application",
        subtype="pdf",
        filename=report_path.name,
    )
    return message


def send_report(report_path: Path, report_date: date, settings: MailSettings) -> None:
    """Mail a finalized report to every BCC recipient."""
    message = build_message(report_path, report_date, settings)
    logger.info("Sending %s to %d recipient(s) via %s", report_path.name, len(settings.bcc), settings.host)
    if settings.port == 465:
        smtp = smtplib.SMTP_SSL(settings.host, settings.port, timeout=config.HTTP_TIMEOUT)
    else:
        smtp = smtplib.SMTP(settings.host, settings.port, timeout=config.HTTP_TIMEOUT)
    with smtp:
        if settings.port != 465:
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls()
                smtp.ehlo()
            else:
                logger.warning("%s does not offer STARTTLS; sending without TLS", settings.host)
        smtp.login(settings.user, settings.password)
        smtp.send_message(message)
