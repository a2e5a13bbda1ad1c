"""
Smoke tests for application wiring: routes, health, settings and startup checks.
"""

import pytest

from app.startup import StartupValidator, run_startup_checks
from core.config import DEFAULT_JWT_SECRET, Settings, settings, validate_production_config


EXPECTED_ROUTES = {
    ("POST", "/auth/session"),
    ("GET", "/auth/user"),
    ("GET", "/auth/status"),
    ("GET", "/admin/users"),
    ("PUT", "/admin/users/{user_id}/role"),
    ("GET", "/businesses"),
    ("GET", "/businesses/top-rated"),
    ("GET", "/businesses/search"),
    ("GET", "/businesses/{business_id}"),
    ("GET", "/businesses/{business_id}/image"),
    ("GET", "/businesses/{business_id}/reviews"),
    ("POST", "/businesses/{business_id}/reviews"),
    ("POST", "/businesses/{business_id}/reviews/anonymous"),
    ("GET", "/businesses/{business_id}/reviews/check"),
    ("GET", "/admin/businesses/mine"),
    ("POST", "/admin/businesses"),
    ("PUT", "/admin/businesses/{business_id}"),
    ("DELETE", "/admin/businesses/{business_id}"),
    ("GET", "/reviews/mine"),
    ("GET", "/reviews/{review_id}"),
    ("PUT", "/reviews/{review_id}"),
    ("DELETE", "/reviews/{review_id}"),
    ("POST", "/reviews/{review_id}/feedback"),
    ("GET", "/reviews/{review_id}/feedback"),
    ("PUT", "/feedback/{feedback_id}/status"),
    ("GET", "/admin/reviews"),
    ("GET", "/admin/reviews/low-rating"),
    ("GET", "/admin/reviews/business/{business_id}"),
    ("GET", "/admin/feedback"),
    ("GET", "/admin/feedback/new"),
    ("GET", "/admin/feedback/status/{status}"),
    ("GET", "/admin/feedback/followup-required"),
    ("GET", "/admin/feedback/{feedback_id}"),
    ("DELETE", "/admin/feedback/{feedback_id}"),
    ("POST", "/admin/aggregates/reconcile"),
    ("POST", "/admin/email/test"),
    ("GET", "/health"),
}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "app": "ReviewGate", "environment": "test"}


def test_routes_registered():
    from app.main import app

    registered = {
        (method.upper(), path)
        for path, operations in app.openapi()["paths"].items()
        for method in operations
    }

    missing = EXPECTED_ROUTES - registered
    assert not missing, f"Missing routes: {sorted(missing)}"


def test_error_body_shape(client):
    response = client.get("/reviews/99999")

    assert response.status_code == 404
    assert response.json() == {
        "detail": "Review 99999 not found",
        "error_code": "NOT_FOUND",
        "path": "/reviews/99999",
    }


class TestSettings:

    def test_comma_separated_lists(self):
        config = Settings(
            CORS_ORIGINS="http://a.test, http://b.test",
            ADMIN_SEED_EMAILS="Boss@Example.com, ops@example.com",
        )

        assert config.CORS_ORIGINS == ["http://a.test", "http://b.test"]
        assert config.ADMIN_SEED_EMAILS == ["boss@example.com", "ops@example.com"]

    def test_lists_from_environment(self, monkeypatch):
        monkeypatch.setenv("ADMIN_SEED_EMAILS", "One@example.com,two@example.com")

        assert Settings().ADMIN_SEED_EMAILS == ["one@example.com", "two@example.com"]

    def test_test_environment_loaded(self):
        assert settings.ENVIRONMENT == "test"
        assert settings.ADMIN_SEED_EMAILS == ["founder@example.com"]
        assert settings.FEEDBACK_RATING_THRESHOLD == 3

    def test_upload_limit_bytes(self):
        assert Settings(MAX_UPLOAD_SIZE_MB=2).max_upload_size_bytes == 2 * 1024 * 1024


class TestProductionValidation:

    def test_insecure_production_rejected(self):
        config = Settings(
            ENVIRONMENT="production",
            JWT_SECRET_KEY=DEFAULT_JWT_SECRET,
            DEBUG=True,
            IDENTITY_PROVIDER_SECRET="",
        )

        with pytest.raises(ValueError) as exc_info:
            validate_production_config(config)

        message = str(exc_info.value)
        assert "JWT_SECRET_KEY" in message
        assert "DEBUG" in message
        assert "IDENTITY_PROVIDER_SECRET" in message

    def test_secure_production_accepted(self):
        config = Settings(
            ENVIRONMENT="production",
            JWT_SECRET_KEY="a-long-and-random-production-secret-value",
            DEBUG=False,
            IDENTITY_PROVIDER_SECRET="gateway",
        )

        validate_production_config(config)

    def test_non_production_not_checked(self):
        validate_production_config(Settings(ENVIRONMENT="development", JWT_SECRET_KEY=DEFAULT_JWT_SECRET))


class TestStartupValidator:

    def test_checks_pass_with_warnings(self):
        passed, errors, warnings = StartupValidator().validate_all()

        assert passed is True
        assert errors == []
        assert any("SMTP_HOST" in w for w in warnings)

    def test_production_errors_abort_startup(self, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        monkeypatch.setattr(settings, "JWT_SECRET_KEY", DEFAULT_JWT_SECRET)

        with pytest.raises(SystemExit):
            run_startup_checks()

    def test_missing_gateway_secret_is_a_warning(self, monkeypatch):
        monkeypatch.setattr(settings, "IDENTITY_PROVIDER_SECRET", "")

        passed, warnings = run_startup_checks()

        assert passed is True
        assert any("IDENTITY_PROVIDER_SECRET" in w for w in warnings)
