# backend/modules/feedback/tests/test_api_endpoints.py

import smtplib
from unittest.mock import patch

from sqlalchemy.orm import Session

from core.config import settings
from modules.feedback.models.feedback_models import Feedback, FeedbackStatus, Review


def post_review(client, business_id, rating, headers, comment=None):
    return client.post(
        f"/businesses/{business_id}/reviews",
        json={"rating": rating, "comment": comment},
        headers=headers,
    )


class TestReviewFlow:
    """The rate, redirect or feedback flow through the HTTP API"""

    def test_high_then_low_rating(
        self, client, business, customer_headers, other_customer_headers
    ):
        response = post_review(client, business.id, 5, customer_headers, "Best croissants")

        assert response.status_code == 201
        data = response.json()
        assert data["should_redirect_to_google"] is True
        assert data["should_show_feedback_form"] is False
        assert data["google_review_url"] == "https://g.page/r/corner-bakery/review"
        assert data["review"]["redirected_to_google"] is True

        profile = client.get(f"/businesses/{business.id}").json()
        assert profile["average_rating"] == 5.0
        assert profile["total_reviews"] == 1

        response = post_review(client, business.id, 2, other_customer_headers, "Queue too long")

        assert response.status_code == 201
        data = response.json()
        assert data["should_redirect_to_google"] is False
        assert data["should_show_feedback_form"] is True
        assert data["google_review_url"] is None
        low_review_id = data["review"]["id"]

        profile = client.get(f"/businesses/{business.id}").json()
        assert profile["average_rating"] == 3.5
        assert profile["total_reviews"] == 2

        response = client.post(
            f"/reviews/{low_review_id}/feedback",
            json={"feedback_text": "Waited 20 minutes", "wants_followup": True},
        )

        assert response.status_code == 201
        feedback = response.json()
        assert feedback["status"] == "new"
        assert feedback["rating"] == 2
        assert feedback["business_profile_id"] == business.id

    def test_feedback_rejected_for_high_rating(self, client, business, customer_headers):
        review_id = post_review(client, business.id, 4, customer_headers).json()["review"]["id"]

        response = client.post(f"/reviews/{review_id}/feedback", json={"feedback_text": "More"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "POLICY_VIOLATION"

    def test_second_feedback_conflicts(self, client, business, customer_headers):
        review_id = post_review(client, business.id, 1, customer_headers).json()["review"]["id"]

        assert client.post(f"/reviews/{review_id}/feedback", json={"feedback_text": "a"}).status_code == 201
        response = client.post(f"/reviews/{review_id}/feedback", json={"feedback_text": "b"})

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    def test_get_review_feedback(self, client, business, customer_headers):
        review_id = post_review(client, business.id, 2, customer_headers).json()["review"]["id"]

        assert client.get(f"/reviews/{review_id}/feedback").status_code == 404

        client.post(f"/reviews/{review_id}/feedback", json={"suggestions": "More seats"})
        response = client.get(f"/reviews/{review_id}/feedback")

        assert response.status_code == 200
        assert response.json()["suggestions"] == "More seats"

    def test_duplicate_review_conflicts(self, client, business, customer_headers):
        assert post_review(client, business.id, 4, customer_headers).status_code == 201

        response = post_review(client, business.id, 5, customer_headers)

        assert response.status_code == 409
        assert client.get(f"/businesses/{business.id}").json()["total_reviews"] == 1

    def test_rating_out_of_range(self, client, business, customer_headers):
        response = post_review(client, business.id, 6, customer_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["path"] == f"/businesses/{business.id}/reviews"

    def test_review_unknown_business(self, client, customer_headers):
        response = post_review(client, 99999, 4, customer_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    def test_review_requires_authentication(self, client, business):
        response = post_review(client, business.id, 5, {})

        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTH_FAILED"

    def test_invalid_token_rejected(self, client, business):
        response = post_review(client, business.id, 5, {"Authorization": "Bearer not-a-token"})

        assert response.status_code == 401

    def test_anonymous_review(self, client, db_session: Session, business):
        response = client.post(
            f"/businesses/{business.id}/reviews/anonymous",
            json={"rating": 3, "is_anonymous": True, "customer_email": "who@example.com"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["should_show_feedback_form"] is True
        assert data["review"]["customer_id"] is None
        assert data["review"]["is_anonymous"] is True

        review = db_session.query(Review).filter(Review.id == data["review"]["id"]).one()
        assert review.customer_email is None

    def test_check_and_list_mine(self, client, business, second_business, customer_headers):
        post_review(client, business.id, 4, customer_headers)

        checked = client.get(f"/businesses/{business.id}/reviews/check", headers=customer_headers).json()
        unchecked = client.get(f"/businesses/{second_business.id}/reviews/check", headers=customer_headers).json()

        assert checked == {"business_id": business.id, "has_reviewed": True}
        assert unchecked["has_reviewed"] is False

        mine = client.get("/reviews/mine", headers=customer_headers)
        assert mine.status_code == 200
        assert [r["business_profile_id"] for r in mine.json()] == [business.id]

    def test_public_review_list_hides_contact_email(self, client, business, customer_headers):
        post_review(client, business.id, 4, customer_headers)

        reviews = client.get(f"/businesses/{business.id}/reviews").json()

        assert len(reviews) == 1
        assert "customer_email" not in reviews[0]

    def test_update_and_delete_own_review(self, client, business, customer_headers):
        review_id = post_review(client, business.id, 2, customer_headers).json()["review"]["id"]

        response = client.put(f"/reviews/{review_id}", json={"rating": 5}, headers=customer_headers)

        assert response.status_code == 200
        assert response.json()["should_redirect_to_google"] is True
        assert client.get(f"/businesses/{business.id}").json()["average_rating"] == 5.0

        response = client.delete(f"/reviews/{review_id}", headers=customer_headers)

        assert response.status_code == 200
        assert client.get(f"/reviews/{review_id}").status_code == 404
        assert client.get(f"/businesses/{business.id}").json()["total_reviews"] == 0

    def test_cannot_modify_someone_elses_review(
        self, client, business, customer_headers, other_customer_headers
    ):
        review_id = post_review(client, business.id, 2, customer_headers).json()["review"]["id"]

        put = client.put(f"/reviews/{review_id}", json={"rating": 5}, headers=other_customer_headers)
        delete = client.delete(f"/reviews/{review_id}", headers=other_customer_headers)

        assert put.status_code == 403
        assert delete.status_code == 403
        assert put.json()["error_code"] == "FORBIDDEN"

    def test_delete_review_removes_feedback(self, client, db_session: Session, business, customer_headers):
        review_id = post_review(client, business.id, 1, customer_headers).json()["review"]["id"]
        feedback_id = client.post(f"/reviews/{review_id}/feedback", json={"feedback_text": "x"}).json()["id"]

        client.delete(f"/reviews/{review_id}", headers=customer_headers)

        assert db_session.query(Feedback).filter(Feedback.id == feedback_id).first() is None


class TestNotificationFailures:

    def test_smtp_failure_does_not_fail_review(self, client, db_session: Session, monkeypatch, business, customer_headers):
        monkeypatch.setattr(settings, "SMTP_HOST", "smtp.test.com")

        with patch(
            "modules.feedback.services.notification_service.smtplib.SMTP",
            side_effect=ConnectionRefusedError("connection refused"),
        ) as mock_smtp:
            response = post_review(client, business.id, 2, customer_headers)

        assert response.status_code == 201
        assert mock_smtp.called
        review = db_session.query(Review).filter(Review.id == response.json()["review"]["id"]).first()
        assert review is not None

    def test_smtp_rejection_does_not_fail_review(self, client, monkeypatch, business, customer_headers):
        monkeypatch.setattr(settings, "SMTP_HOST", "smtp.test.com")

        with patch("modules.feedback.services.notification_service.smtplib.SMTP") as mock_smtp:
            mock_smtp.return_value.__enter__.return_value.send_message.side_effect = (
                smtplib.SMTPRecipientsRefused({"owner@example.com": (550, b"no such user")})
            )
            response = post_review(client, business.id, 5, customer_headers)

        assert response.status_code == 201
        assert client.get(f"/businesses/{business.id}").json()["total_reviews"] == 1


class TestFeedbackStatus:

    def _feedback_id(self, client, business, customer_headers):
        review_id = post_review(client, business.id, 2, customer_headers).json()["review"]["id"]
        return client.post(f"/reviews/{review_id}/feedback", json={"feedback_text": "Slow"}).json()["id"]

    def test_admin_updates_status(self, client, business, customer_headers, admin_headers):
        feedback_id = self._feedback_id(client, business, customer_headers)

        response = client.put(
            f"/feedback/{feedback_id}/status",
            json={"status": "resolved", "admin_response": "Added a second till"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "resolved"
        assert data["admin_response"] == "Added a second till"
        assert data["responded_at"] is not None

    def test_customer_cannot_update_status(self, client, business, customer_headers):
        feedback_id = self._feedback_id(client, business, customer_headers)

        response = client.put(
            f"/feedback/{feedback_id}/status", json={"status": "closed"}, headers=customer_headers
        )

        assert response.status_code == 403

    def test_unknown_status_rejected(self, client, business, customer_headers, admin_headers):
        feedback_id = self._feedback_id(client, business, customer_headers)

        response = client.put(
            f"/feedback/{feedback_id}/status", json={"status": "archived"}, headers=admin_headers
        )

        assert response.status_code == 422


class TestAdminEndpoints:
    """Admin-only listings and maintenance"""

    def test_customer_is_forbidden(self, client, customer_headers):
        for path in ("/admin/reviews", "/admin/feedback", "/admin/feedback/new"):
            response = client.get(path, headers=customer_headers)
            assert response.status_code == 403, path

        assert client.post("/admin/aggregates/reconcile", headers=customer_headers).status_code == 403

    def test_anonymous_is_unauthorized(self, client):
        assert client.get("/admin/reviews").status_code == 401

    def test_review_listings(
        self, client, business, customer_headers, other_customer_headers, admin_headers
    ):
        post_review(client, business.id, 2, customer_headers)
        post_review(client, business.id, 5, other_customer_headers)

        all_reviews = client.get("/admin/reviews", headers=admin_headers).json()
        low = client.get("/admin/reviews/low-rating", headers=admin_headers).json()
        strict = client.get("/admin/reviews/low-rating?threshold=1", headers=admin_headers).json()

        assert len(all_reviews) == 2
        assert "customer_email" in all_reviews[0]
        assert [r["rating"] for r in low] == [2]
        assert strict == []

    def test_business_reviews_owner_only(
        self, client, business, customer_headers, admin_headers, other_admin_headers
    ):
        post_review(client, business.id, 3, customer_headers)

        owner = client.get(f"/admin/reviews/business/{business.id}", headers=admin_headers)
        rival = client.get(f"/admin/reviews/business/{business.id}", headers=other_admin_headers)

        assert owner.status_code == 200
        assert len(owner.json()) == 1
        assert rival.status_code == 403

    def test_feedback_listings(
        self, client, business, customer_headers, other_customer_headers, admin_headers
    ):
        first = post_review(client, business.id, 1, customer_headers).json()["review"]["id"]
        second = post_review(client, business.id, 3, other_customer_headers).json()["review"]["id"]
        followup_id = client.post(
            f"/reviews/{first}/feedback", json={"feedback_text": "Call me", "wants_followup": True}
        ).json()["id"]
        other_id = client.post(f"/reviews/{second}/feedback", json={"feedback_text": "Meh"}).json()["id"]
        client.put(f"/feedback/{other_id}/status", json={"status": "in_progress"}, headers=admin_headers)

        assert len(client.get("/admin/feedback", headers=admin_headers).json()) == 2
        assert [f["id"] for f in client.get("/admin/feedback/new", headers=admin_headers).json()] == [followup_id]
        assert [
            f["id"] for f in client.get("/admin/feedback/status/in_progress", headers=admin_headers).json()
        ] == [other_id]
        assert [
            f["id"] for f in client.get("/admin/feedback/followup-required", headers=admin_headers).json()
        ] == [followup_id]
        assert client.get(f"/admin/feedback/{other_id}", headers=admin_headers).json()["status"] == "in_progress"

        response = client.delete(f"/admin/feedback/{other_id}", headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"/admin/feedback/{other_id}", headers=admin_headers).status_code == 404

    def test_reconcile(self, client, db_session: Session, business, customer_headers, admin_headers):
        post_review(client, business.id, 4, customer_headers)
        business.average_rating = 1.0
        business.total_reviews = 9
        db_session.commit()

        response = client.post("/admin/aggregates/reconcile", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "checked": 1,
            "corrected": 1,
            "failed": 0,
            "corrected_ids": [business.id],
        }
        assert client.get(f"/businesses/{business.id}").json()["average_rating"] == 4.0

    def test_email_test_without_smtp(self, client, admin_headers):
        response = client.post(
            "/admin/email/test", json={"to_email": "ops@example.com"}, headers=admin_headers
        )

        assert response.status_code == 502
        assert response.json()["error_code"] == "EMAIL_DELIVERY_FAILED"

    def test_email_test_sends(self, client, monkeypatch, admin_headers):
        monkeypatch.setattr(settings, "SMTP_HOST", "smtp.test.com")

        with patch("modules.feedback.services.notification_service.smtplib.SMTP") as mock_smtp:
            response = client.post(
                "/admin/email/test", json={"to_email": "ops@example.com"}, headers=admin_headers
            )

        assert response.status_code == 200
        mock_smtp.return_value.__enter__.return_value.send_message.assert_called_once()


def test_feedback_status_values_are_lowercase():
    assert [s.value for s in FeedbackStatus] == ["new", "in_progress", "resolved", "closed"]
