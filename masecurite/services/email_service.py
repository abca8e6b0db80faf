"""
Contact form notifications, sent as HTML + plain-text email through Resend.
"""

from __future__ import annotations

import logging
from datetime import datetime
from html import escape
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

import requests

from masecurite.core.constants import CONTACT_SENDER, RESEND_EMAILS_API, USER_AGENT
from masecurite.models.contact import ContactRequest
from masecurite.services.presentation import MONTHS_FR

logger = logging.getLogger(__name__)

PARIS = ZoneInfo("Europe/Paris")

WEEKDAYS_FR = ["lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"]

SUBJECT_LABELS = {
    "question-generale": "Question Générale",
    "support-technique": "Support Technique",
    "abonnement": "Abonnement",
    "facturation": "Facturation",
    "autre": "Autre",
}

NO_PHONE = "Non fourni"
FOOTER = "Solutions Cloud sécurisées pour particuliers et professionnels"


class EmailDeliveryError(RuntimeError):
    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.details = details


def subject_label(subject: str) -> str:
    return SUBJECT_LABELS.get(subject, subject)


def format_received_at(moment: Optional[datetime] = None) -> str:
    """e.g. "mardi 4 mars 2025 à 14:05:09" in Paris time."""
    local = (moment or datetime.now(PARIS)).astimezone(PARIS)
    return (
        f"{WEEKDAYS_FR[local.weekday()]} {local.day} {MONTHS_FR[local.month - 1]} "
        f"{local.year} à {local:%H:%M:%S}"
    )


def _field_block(label: str, value_html: str) -> str:
    return (
        '<tr><td style="padding-bottom: 24px;">'
        '<table role="presentation" width="100%" cellspacing="0" cellpadding="0" border="0" '
        'style="background-color: #f1f5f9; border-radius: 8px;"><tr><td style="padding: 20px;">'
        '<p style="margin: 0 0 8px 0; color: #94a3b8; font-size: 12px; font-weight: 600; '
        f'text-transform: uppercase;">{label}</p>'
        f'<p style="margin: 0; color: #1e293b; font-size: 15px; white-space: pre-wrap;">{value_html}</p>'
        "</td></tr></table></td></tr>"
    )


def render_html(form: ContactRequest, label: str, received_at: str) -> str:
    # every user-supplied value is escaped; the form is public
    email = escape(form.email or "")
    rows = "".join(
        [
            _field_block("Nom", escape(form.name or "")),
            _field_block("Email", f'<a href="mailto:{email}" style="color: #f97316;">{email}</a>'),
            _field_block("Téléphone", escape(form.phone or NO_PHONE)),
            _field_block("Sujet", escape(label)),
            _field_block("Message", escape(form.message or "")),
        ]
    )
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Nouveau message de contact</title></head>
<body style="margin: 0; padding: 0; font-family: Arial, sans-serif; background-color: #f5f5f5;">
  <table role="presentation" width="600" cellspacing="0" cellpadding="0" border="0" align="center"
         style="max-width: 600px; background-color: #ffffff; border-radius: 16px;">
    <tr><td style="background: #f97316; padding: 40px; text-align: center; border-radius: 16px 16px 0 0;">
      <h1 style="margin: 0; color: #ffffff; font-size: 28px;">Nouveau Message de Contact</h1>
    </td></tr>
    <tr><td style="padding: 40px;">
      <p style="margin: 0 0 30px 0; color: #64748b; font-size: 14px;">{escape(received_at)}</p>
      <table role="presentation" width="100%" cellspacing="0" cellpadding="0" border="0">{rows}</table>
      <p style="text-align: center;">
        <a href="mailto:{email}" style="display: inline-block; padding: 16px 32px; background: #f97316;
           color: #ffffff; text-decoration: none; border-radius: 8px; font-weight: 600;">Répondre au client</a>
      </p>
    </td></tr>
    <tr><td style="background-color: #f8fafc; padding: 30px; text-align: center; border-radius: 0 0 16px 16px;">
      <p style="margin: 0 0 8px 0; color: #64748b; font-size: 14px;">MaSécurité</p>
      <p style="margin: 0; color: #94a3b8; font-size: 12px;">{FOOTER}</p>
    </td></tr>
  </table>
</body>
</html>"""


def render_text(form: ContactRequest, label: str, received_at: str) -> str:
    return f"""Nouveau Message de Contact - MaSécurité
==========================================

Reçu le: {received_at}

NOM: {form.name}
EMAIL: {form.email}
TÉLÉPHONE: {form.phone or NO_PHONE}
SUJET: {label}

MESSAGE:
{form.message}

--
MaSécurité
{FOOTER}
"""


def send_contact_notification(
    form: ContactRequest,
    api_key: str,
    recipients: Iterable[str],
    timeout: float = 8.0,
) -> Optional[str]:
    """
    Send the contact form to the support inbox, with Reply-To set to the
    visitor. Returns the Resend email id.
    """
    label = subject_label(form.subject or "")
    received_at = format_received_at()

    payload = {
        "from": CONTACT_SENDER,
        "to": list(recipients),
        "reply_to": form.email,
        "subject": f"Nouveau Contact - {label}",
        "html": render_html(form, label, received_at),
        "text": render_text(form, label, received_at),
    }

    try:
        resp = requests.post(
            RESEND_EMAILS_API,
            json=payload,
            headers={
                "Authorization": f"Bearer {api_key}",
                "user-agent": USER_AGENT,
            },
            timeout=timeout,
        )
    except requests.RequestException as exc:
        logger.error("contact_email_failed error=%s", type(exc).__name__)
        raise EmailDeliveryError("Failed to send email") from exc

    body = _json_body(resp)

    if resp.status_code >= 300:
        logger.error("contact_email_failed status=%s", resp.status_code)
        raise EmailDeliveryError("Failed to send email", body.get("message"))

    logger.info("contact_email_sent subject=%s", label)
    return body.get("id")


def _json_body(resp: requests.Response) -> dict:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
