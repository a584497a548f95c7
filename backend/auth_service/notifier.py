"""Workflow emails sent through Resend."""

import logging
from typing import Any, Dict, Optional

import resend
from markupsafe import escape

from backend.auth_service.errors import NotificationError
from backend.auth_service.models import Organizer

logger = logging.getLogger(__name__)


class EmailNotifier:
    """
    Sends the two onboarding emails: the approval request to the admin and
    the confirmation to the organizer once approved.

    Without an API key nothing is delivered; a warning is logged instead so
    local development works without a mail account.
    """

    def __init__(self, api_key: Optional[str], from_email: str):
        self.from_email = from_email
        self.configured = bool(api_key)

        if self.configured:
            resend.api_key = api_key
            logger.info(f"EmailNotifier initialized with from: {from_email}")
        else:
            logger.warning("RESEND_API_KEY not set. Emails will not be sent.")

    def _send(self, to_email: str, subject: str, html: str) -> Optional[Dict[str, Any]]:
        if not self.configured:
            logger.warning(f"Email not sent (notifier not configured) to {to_email}: {subject}")
            return None

        params = {
            "from": self.from_email,
            "to": [to_email],
            "subject": subject,
            "html": html,
        }
        try:
            result = resend.Emails.send(params)
        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            raise NotificationError(str(e)) from e

        logger.info(f"Email '{subject}' sent to {to_email}")
        return result

    def notify_admin(self, admin_address: str, organizer: Organizer, approval_link: str):
        """
        Ask the admin to approve a new organizer.

        Raises:
            NotificationError: If delivery fails.
        """
        html = (
            "<p>New organizer registration request:</p>"
            "<ul>"
            f"<li>Name: {escape(organizer.organizer_name)}</li>"
            f"<li>Email: {escape(organizer.email)}</li>"
            "</ul>"
            f'<p><a href="{escape(approval_link)}">Approve this organizer</a></p>'
        )
        return self._send(admin_address, "Organizer Approval Request", html)

    def notify_organizer_approved(self, organizer: Organizer):
        """
        Tell the organizer their account can now log in.

        Raises:
            NotificationError: If delivery fails.
        """
        html = (
            f"<p>Hello {escape(organizer.organizer_name)},</p>"
            "<p>Your organizer account has been approved. "
            "You can now log in with your email and password.</p>"
        )
        return self._send(organizer.email, "Your Organizer Account Has Been Approved", html)
