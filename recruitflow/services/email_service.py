"""
Transactional email via Resend.

Two messages are sent to candidates:
- interview invites (manager interview, final HR interview, onboarding).
  Delivery failure raises EmailDeliveryError so the caller can undo the
  scheduling step.
- application confirmations. Best effort: failures are logged and
  reported as False, never raised.
"""

import html
import logging
from datetime import datetime
from typing import Optional
import resend
from recruitflow.core.config import settings

logger = logging.getLogger(__name__)

INTERVIEW_LABELS = {
    "manager": "Interview with the Hiring Manager",
    "final_hr": "Final Interview with HR",
    "onboarding": "Onboarding Session",
}


class EmailDeliveryError(Exception):
    """Raised when a mandatory email could not be handed to the provider."""


def _escape(value: Optional[str]) -> str:
    # Candidate-supplied text goes into HTML bodies
    return html.escape(str(value), quote=True) if value is not None else ""


class EmailService:
    """
    Service for sending candidate emails through the Resend API.
    """

    def __init__(self):
        resend.api_key = settings.RESEND_API_KEY

    @property
    def sender(self) -> str:
        return f"{settings.RESEND_FROM_NAME} <{settings.RESEND_FROM_EMAIL}>"

    def _send(self, to_email: str, subject: str, html: str, text: str) -> str:
        """Hand one message to Resend and return its id."""
        if not settings.RESEND_API_KEY:
            raise EmailDeliveryError("RESEND_API_KEY is not configured")

        params = {
            "from": self.sender,
            "to": [to_email],
            "subject": subject,
            "html": html,
            "text": text,
        }
        try:
            response = resend.Emails.send(params)
        except Exception as e:
            raise EmailDeliveryError(f"Resend rejected message to {to_email}: {e}") from e

        return response.get("id") if isinstance(response, dict) else None

    def send_interview_invite(
        self,
        to_email: str,
        candidate_name: str,
        position_name: Optional[str],
        interview_type: str,
        start: datetime,
        end: datetime,
        notes: Optional[str] = None,
        schedule_link: Optional[str] = None
    ) -> str:
        """
        Send an interview/onboarding invitation.

        Args:
            to_email: Candidate email address
            candidate_name: Candidate full name
            position_name: Position applied for
            interview_type: "manager", "final_hr" or "onboarding"
            start: Slot start (UTC)
            end: Slot end (UTC)
            notes: Free-text notes from HR
            schedule_link: Meeting link, if any

        Returns:
            str: Provider message id

        Raises:
            EmailDeliveryError: If the message could not be sent
        """
        label = INTERVIEW_LABELS.get(interview_type, "Interview")
        subject = f"{label} - {position_name or settings.COMPANY_NAME}"

        body = self._build_invite_html(candidate_name, label, position_name, start, end, notes, schedule_link)
        text = self._build_invite_text(candidate_name, label, position_name, start, end, notes, schedule_link)

        message_id = self._send(to_email, subject, body, text)
        logger.info(f"Interview invite ({interview_type}) sent to {to_email} (MessageId: {message_id})")
        return message_id

    def send_application_confirmation(
        self,
        to_email: str,
        candidate_name: str,
        position_name: Optional[str]
    ) -> bool:
        """
        Confirm receipt of an application.

        Returns:
            bool: True if email sent successfully, False otherwise
        """
        subject = f"Application Received - {position_name or settings.COMPANY_NAME}"
        body = f"""
<html>
<body style="font-family: Arial, sans-serif; color: #333333;">
    <p>Dear {_escape(candidate_name)},</p>
    <p>Thank you for applying for the <strong>{_escape(position_name)}</strong> position at {_escape(settings.COMPANY_NAME)}.
    We have received your CV and our team will review it shortly.</p>
    <p>Best regards,<br>{_escape(settings.COMPANY_NAME)} HR Team</p>
</body>
</html>
"""
        text = (
            f"Dear {candidate_name},\n\n"
            f"Thank you for applying for the {position_name} position at {settings.COMPANY_NAME}. "
            f"We have received your CV and our team will review it shortly.\n\n"
            f"Best regards,\n{settings.COMPANY_NAME} HR Team\n"
        )

        try:
            message_id = self._send(to_email, subject, body, text)
            logger.info(f"Application confirmation sent to {to_email} (MessageId: {message_id})")
            return True
        except EmailDeliveryError as e:
            logger.error(f"Application confirmation to {to_email} failed: {e}")
            return False

    def _build_invite_html(self, name, label, position_name, start, end, notes, schedule_link) -> str:
        link_row = (
            f'<p><strong>Link:</strong> <a href="{_escape(schedule_link)}">{_escape(schedule_link)}</a></p>'
            if schedule_link else ""
        )
        notes_row = f"<p><strong>Notes:</strong> {_escape(notes)}</p>" if notes else ""

        return f"""
<html>
<body style="font-family: Arial, sans-serif; color: #333333;">
    <h2 style="color: #1f2937;">{label}</h2>
    <p>Dear {_escape(name)},</p>
    <p>You are invited to the next step for the <strong>{_escape(position_name)}</strong> position.</p>
    <p><strong>When:</strong> {start:%A, %d %B %Y %H:%M} - {end:%H:%M} (UTC)</p>
    {link_row}
    {notes_row}
    <p>Please reply to this email if you cannot attend.</p>
    <p>Best regards,<br>{_escape(settings.COMPANY_NAME)} HR Team</p>
</body>
</html>
"""

    def _build_invite_text(self, name, label, position_name, start, end, notes, schedule_link) -> str:
        lines = [
            f"Dear {name},",
            "",
            f"{label} for the {position_name} position.",
            f"When: {start:%A, %d %B %Y %H:%M} - {end:%H:%M} (UTC)",
        ]
        if schedule_link:
            lines.append(f"Link: {schedule_link}")
        if notes:
            lines.append(f"Notes: {notes}")
        lines += ["", "Please reply to this email if you cannot attend.", "", f"{settings.COMPANY_NAME} HR Team"]
        return "\n".join(lines)


# Singleton instance
email_service = EmailService()
