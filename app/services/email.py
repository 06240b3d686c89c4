"""Email service using Resend API.

Sending is best effort: every helper returns False on failure and logs,
it never raises into the request that triggered it.
"""

from __future__ import annotations

import html as html_lib
import logging

from app.config import get_settings

logger = logging.getLogger(__name__)

_settings = get_settings()

INQUIRY_LABELS = {
    "quote": "Request a Quote",
    "leasing": "Leasing Enquiry",
    "demo": "Book a Demo",
    "partnership": "Partnership Opportunity",
    "support": "Customer Support",
    "general": "General Enquiry",
}


def _send(to: str, subject: str, html: str, sender: str | None = None, reply_to: str | None = None) -> bool:
    """Send an email via Resend. Returns True on success."""
    if not _settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set, email to %s not sent: %s", to, subject)
        return False

    import resend
    resend.api_key = _settings.resend_api_key

    params = {
        "from": sender or _settings.email.from_address,
        "to": [to],
        "subject": subject,
        "html": html,
    }
    if reply_to:
        params["reply_to"] = reply_to

    try:
        resend.Emails.send(params)
        return True
    except Exception:
        logger.exception("Failed to send email to %s", to)
        return False


def send_contact_confirmation(name: str, email: str, inquiry_type: str) -> bool:
    """Thank the customer for their enquiry."""
    label = INQUIRY_LABELS.get(inquiry_type, "General Enquiry")
    html = f"""
    <h2>Thanks for getting in touch, {html_lib.escape(name)}!</h2>
    <p>We've received your <strong>{label}</strong> and a member of our team will get back to you within one business day.</p>
    <p>If your enquiry is urgent, reply to this email or call us directly.</p>
    <p>The Golf Chariots Team</p>
    """
    return _send(email, "We've received your enquiry", html)


def send_contact_notification(
    name: str, email: str, phone: str | None, inquiry_type: str, message: str
) -> bool:
    """Forward a contact-form submission to the operator inbox."""
    label = INQUIRY_LABELS.get(inquiry_type, "General Enquiry")
    message_html = html_lib.escape(message).replace("\n", "<br>")
    html = f"""
    <h2>New website enquiry: {label}</h2>
    <table cellpadding="6">
      <tr><td><strong>Name</strong></td><td>{html_lib.escape(name)}</td></tr>
      <tr><td><strong>Email</strong></td><td>{html_lib.escape(email)}</td></tr>
      <tr><td><strong>Phone</strong></td><td>{html_lib.escape(phone or "Not provided")}</td></tr>
      <tr><td><strong>Inquiry type</strong></td><td>{label}</td></tr>
    </table>
    <p><strong>Message</strong></p>
    <p>{message_html}</p>
    """
    return _send(
        _settings.email.operator_address,
        f"New {label} from {name}",
        html,
        sender=_settings.email.website_from_address,
        reply_to=email,
    )
