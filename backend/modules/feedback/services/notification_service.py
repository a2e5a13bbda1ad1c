# backend/modules/feedback/services/notification_service.py

import smtplib
import logging
from dataclasses import dataclass
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, Optional

from fastapi import status

from core.config import Settings, settings as default_settings
from core.exceptions import APIError
from modules.feedback.models.feedback_models import Review
from modules.feedback.templates.email_templates import (
    business_slug,
    render_review_notification,
    render_test_email,
)

logger = logging.getLogger(__name__)


class EmailDeliveryError(APIError):
    """The SMTP gateway refused or could not be reached"""

    def __init__(self, detail: str = "Email delivery failed"):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
            error_code="EMAIL_DELIVERY_FAILED",
        )


@dataclass(frozen=True)
class ReviewSnapshot:
    """
    Plain copy of everything the notification needs.

    Taken inside the request so delivery, which runs after the response
    and outside the request's session, never touches ORM state.
    """
    review_id: int
    rating: int
    comment: Optional[str]
    is_anonymous: bool
    customer_name: Optional[str]
    customer_email: Optional[str]
    created_at: datetime
    business_id: int
    business_name: str
    owner_email: Optional[str]
    owner_name: Optional[str]

    @classmethod
    def from_review(cls, review: Review) -> "ReviewSnapshot":
        business = review.business_profile
        owner = business.created_by
        return cls(
            review_id=review.id,
            rating=review.rating,
            comment=review.comment,
            is_anonymous=review.is_anonymous,
            customer_name=review.customer_name,
            customer_email=review.customer_email,
            created_at=review.created_at,
            business_id=business.id,
            business_name=business.business_name,
            owner_email=owner.email if owner else None,
            owner_name=owner.name if owner else None,
        )

    @property
    def display_name(self) -> str:
        if self.is_anonymous:
            return "Anonymous Customer"
        if self.customer_name and self.customer_name.strip():
            return self.customer_name
        if self.customer_email:
            local_part = self.customer_email.split("@")[0]
            return local_part[:1].upper() + local_part[1:]
        return "Customer"

    @property
    def contact_email(self) -> str:
        if self.is_anonymous:
            return ""
        return self.customer_email or ""


class EmailBackend:
    """Email notification backend using SMTP"""

    def __init__(self, config: Settings = default_settings):
        self.smtp_host = config.SMTP_HOST
        self.smtp_port = config.SMTP_PORT
        self.smtp_username = config.SMTP_USERNAME
        self.smtp_password = config.SMTP_PASSWORD
        self.use_tls = config.SMTP_USE_TLS
        self.from_email = config.FROM_EMAIL
        self.from_name = config.FROM_NAME

    @property
    def configured(self) -> bool:
        return bool(self.smtp_host)

    def send_email(
        self,
        to_email: str,
        subject: str,
        text_content: str,
        html_content: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Send one message. Raises ``smtplib.SMTPException``/``OSError`` on failure."""
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = to_email

        message.attach(MIMEText(text_content, "plain", "utf-8"))
        if html_content:
            message.attach(MIMEText(html_content, "html", "utf-8"))

        with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
            if self.use_tls:
                server.starttls()
            if self.smtp_username and self.smtp_password:
                server.login(self.smtp_username, self.smtp_password)
            server.send_message(message)

        return {
            "success": True,
            "message_id": f"email_{datetime.utcnow().timestamp()}",
            "provider": "smtp",
        }


class ReviewNotificationService:
    """Tells business owners about new reviews"""

    def __init__(
        self,
        backend: Optional[EmailBackend] = None,
        config: Settings = default_settings,
    ):
        self.config = config
        self.backend = backend or EmailBackend(config)

    def notify_review_created(self, snapshot: ReviewSnapshot) -> bool:
        """
        Email the business owner about a new review.

        Returns True when a message was handed to SMTP. Failures are logged
        and never raised: the review is already stored.
        """
        if not self.config.REVIEW_NOTIFICATIONS_ENABLED:
            return False
        if not self.backend.configured:
            logger.info(f"SMTP not configured; skipping notification for review {snapshot.review_id}")
            return False
        if not snapshot.owner_email:
            logger.warning(
                f"Business {snapshot.business_id} has no owner email; "
                f"skipping notification for review {snapshot.review_id}"
            )
            return False

        try:
            subject, text_body, html_body = render_review_notification(
                self._review_variables(snapshot)
            )
            self.backend.send_email(snapshot.owner_email, subject, text_body, html_body)
            logger.info(
                f"Review notification for review {snapshot.review_id} sent to {snapshot.owner_email}"
            )
            return True

        except Exception as e:
            logger.error(
                f"Failed to send review notification for review {snapshot.review_id}: {e}",
                exc_info=True,
            )
            return False

    def send_test_email(self, to_email: str) -> Dict[str, Any]:
        """Send a configuration check email. Unlike review notifications, failures surface."""
        if not self.backend.configured:
            raise EmailDeliveryError("Email is not configured (SMTP_HOST is empty)")

        subject, text_body = render_test_email(self.config.APP_NAME)
        try:
            result = self.backend.send_email(to_email, subject, text_body)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send test email to {to_email}: {e}")
            raise EmailDeliveryError(f"Email configuration error: {e}")

        logger.info(f"Test email sent to {to_email}")
        return result

    def _review_variables(self, snapshot: ReviewSnapshot) -> Dict[str, Any]:
        frontend_url = self.config.FRONTEND_URL.rstrip("/")
        return {
            "app_name": self.config.APP_NAME,
            "owner_name": snapshot.owner_name or "there",
            "business_name": snapshot.business_name,
            "rating": snapshot.rating,
            "comment": (snapshot.comment or "").strip(),
            "customer_name": snapshot.display_name,
            "customer_email": snapshot.contact_email,
            "created_at": snapshot.created_at.strftime("%b %d, %Y at %H:%M")
            if snapshot.created_at
            else "",
            "feedback_form_shown": snapshot.rating <= self.config.FEEDBACK_RATING_THRESHOLD,
            "admin_url": f"{frontend_url}/admin",
            "business_url": f"{frontend_url}/{business_slug(snapshot.business_name)}",
        }


def send_review_notification(snapshot: ReviewSnapshot) -> None:
    """Background task entry point"""
    ReviewNotificationService().notify_review_created(snapshot)
