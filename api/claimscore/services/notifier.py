import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import List

from claimscore.config import settings
from claimscore.models.submissions import DOCUMENT_TYPE_LABELS, ClaimSubmission, NotificationResult

logger = logging.getLogger(__name__)


def missing_documents_subject(submission: ClaimSubmission) -> str:
    return f"Missing Documents for {submission.patient_info.name} - Submission {submission.id}"


def missing_documents_text(submission: ClaimSubmission) -> str:
    patient = submission.patient_info
    lines: List[str] = [
        "A claim submission requires additional documentation from the healthcare provider.",
        "",
        f"Patient: {patient.name}",
        f"Email: {patient.email}",
        f"Phone: {patient.phone}",
        f"Submission ID: {submission.id}",
        "",
        "The following documents are required to process this claim:",
    ]
    lines += [f"  - {DOCUMENT_TYPE_LABELS[t]}" for t in submission.missing_documents]
    lines += ["", "Please provide the missing documents at your earliest convenience."]
    return "\n".join(lines)


def missing_documents_html(submission: ClaimSubmission) -> str:
    patient = submission.patient_info
    items = "".join(f"<li>{escape(DOCUMENT_TYPE_LABELS[t])}</li>" for t in submission.missing_documents)
    return f"""
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <h2>Missing Documents Notification</h2>
    <p>A claim submission requires additional documentation from the healthcare provider.</p>
    <h3>Patient Information</h3>
    <p>
      <strong>Name:</strong> {escape(patient.name)}<br>
      <strong>Email:</strong> {escape(str(patient.email))}<br>
      <strong>Phone:</strong> {escape(patient.phone)}<br>
      <strong>Submission ID:</strong> {escape(submission.id)}
    </p>
    <h3>Missing Documents</h3>
    <ul>{items}</ul>
    <p>Please provide the missing documents at your earliest convenience to allow the claim to be processed.</p>
  </body>
</html>
    """.strip()


def send_missing_documents_email(submission: ClaimSubmission) -> NotificationResult:
    """
    E-mail the provider the list of documents still missing from a submission.
    Failures are returned, not raised.
    """
    if not submission.provider_email:
        return NotificationResult(success=False, error="No provider email configured")

    if not settings.SMTP_USERNAME or not settings.SMTP_PASSWORD:
        logger.warning("SMTP credentials not configured; cannot notify for submission %s", submission.id)
        return NotificationResult(success=False, error="SMTP credentials are not configured")

    msg = MIMEMultipart("alternative")
    msg["From"] = settings.FROM_EMAIL
    msg["To"] = str(submission.provider_email)
    msg["Subject"] = missing_documents_subject(submission)
    msg.attach(MIMEText(missing_documents_text(submission), "plain"))
    msg.attach(MIMEText(missing_documents_html(submission), "html"))

    try:
        context = ssl.create_default_context()
        with smtplib.SMTP(settings.SMTP_SERVER, settings.SMTP_PORT) as server:
            server.starttls(context=context)
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as ex:
        logger.error("Error sending missing-documents email for %s: %s", submission.id, ex)
        return NotificationResult(success=False, error=str(ex) or "Failed to send email")

    logger.info("Missing-documents email sent for submission %s to %s", submission.id, submission.provider_email)
    return NotificationResult(success=True)
