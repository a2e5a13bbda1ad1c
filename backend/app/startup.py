"""
Application startup validation.

Runs configuration and connectivity checks before the API serves requests.
In production any failed check aborts startup; elsewhere failures are
logged and the app starts anyway.
"""

import logging
import sys
from typing import List, Tuple

import sqlalchemy as sa
from sqlalchemy import text

from core.config import settings, validate_production_config, DEFAULT_JWT_SECRET
from core.database import engine

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ["users", "business_profiles", "reviews", "feedback"]


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_database_connection(self) -> bool:
        """Check database connectivity"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except Exception as e:
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def check_environment_config(self) -> bool:
        """Validate secrets and production settings"""
        try:
            validate_production_config(settings)
        except ValueError as e:
            self.errors.append(f"Configuration validation failed: {str(e)}")
            return False

        if settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
            self.warnings.append("Using development JWT_SECRET_KEY - change for production")
        elif len(settings.JWT_SECRET_KEY) < 32:
            self.warnings.append("JWT_SECRET_KEY is shorter than 32 characters")

        if not settings.IDENTITY_PROVIDER_SECRET:
            self.warnings.append("IDENTITY_PROVIDER_SECRET not set - sign-in is disabled")

        return True

    def check_email_config(self) -> bool:
        if not settings.email_enabled:
            self.warnings.append("SMTP_HOST not configured - review notifications are disabled")
        return True

    def check_required_tables(self) -> bool:
        """Check if required database tables exist"""
        try:
            existing_tables = sa.inspect(engine).get_table_names()
            missing_tables = [t for t in REQUIRED_TABLES if t not in existing_tables]

            if missing_tables:
                self.warnings.append(
                    f"Missing database tables: {', '.join(missing_tables)}. "
                    "Run migrations with: alembic upgrade head"
                )
        except Exception as e:
            self.warnings.append(f"Could not check database tables: {str(e)}")
        return True

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """Run all validation checks"""
        checks = [
            ("Environment Configuration", self.check_environment_config),
            ("Database Connection", self.check_database_connection),
            ("Database Tables", self.check_required_tables),
            ("Email Configuration", self.check_email_config),
        ]

        all_passed = True

        for check_name, check_func in checks:
            logger.info(f"Running check: {check_name}")
            try:
                if not check_func():
                    all_passed = False
            except Exception as e:
                self.errors.append(f"{check_name} check failed with error: {str(e)}")
                all_passed = False

        return all_passed, self.errors, self.warnings


def run_startup_checks():
    """Run all startup validation checks"""
    logger.info(f"Starting {settings.APP_NAME} API ({settings.ENVIRONMENT})")

    validator = StartupValidator()
    passed, errors, warnings = validator.validate_all()

    for warning in warnings:
        logger.warning(f"Startup warning: {warning}")

    for error in errors:
        logger.error(f"Startup error: {error}")

    if not passed and settings.is_production:
        logger.error("Cannot start in production with errors!")
        sys.exit(1)
    elif not passed:
        logger.warning(f"Starting in {settings.ENVIRONMENT} mode despite errors")
    else:
        logger.info("All startup checks passed")

    return passed, warnings


def configure_startup_logging():
    """Configure logging for startup"""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
