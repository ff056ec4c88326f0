"""
Startup Validation Module

Checks configuration and database connectivity when the app is created and
logs a structured report. In production, critical failures stop startup.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "dev-secret-change-me"
DEV_ADMIN_PASSWORD = "admin123"


@dataclass
class ValidationResult:
    """Result of a validation check."""
    name: str
    passed: bool
    message: str
    severity: str = "error"  # error, warning, info
    remediation: Optional[str] = None


@dataclass
class StartupReport:
    """Startup validation report."""
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    environment: str = "development"
    validations: List[ValidationResult] = field(default_factory=list)
    ready_for_production: bool = False

    def add_validation(self, result: ValidationResult):
        self.validations.append(result)

    def has_critical_failures(self) -> bool:
        return any(v.severity == "error" and not v.passed for v in self.validations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "environment": self.environment,
            "ready_for_production": self.ready_for_production,
            "validations": [
                {
                    "name": v.name,
                    "passed": v.passed,
                    "message": v.message,
                    "severity": v.severity,
                    "remediation": v.remediation
                }
                for v in self.validations
            ],
            "summary": {
                "total_validations": len(self.validations),
                "passed": sum(1 for v in self.validations if v.passed),
                "failed": sum(1 for v in self.validations if not v.passed)
            }
        }


class StartupValidator:
    """
    Validates:
    1. Session secret is set and strong enough
    2. Database URI is configured and reachable
    3. Admin credentials are not the development defaults
    4. Default page size is within the allowed range
    """

    def __init__(self, app, session):
        self.app = app
        self.session = session
        self.report = StartupReport(environment=app.config.get('ENV_NAME', 'development'))

    def is_production(self) -> bool:
        return self.report.environment == "production"

    def _severity(self) -> str:
        # Development defaults are expected locally; only production treats them as fatal
        return "error" if self.is_production() else "warning"

    def validate_secret_key(self) -> None:
        secret = self.app.config.get('SECRET_KEY') or ""
        if not secret or secret == DEV_SECRET_KEY:
            self.report.add_validation(ValidationResult(
                name="security:session_secret",
                passed=False,
                message="SESSION_SECRET not set, using development key",
                severity=self._severity(),
                remediation="Generate a strong random key: python -c 'import secrets; print(secrets.token_hex(32))'"
            ))
        elif len(secret) < 32:
            self.report.add_validation(ValidationResult(
                name="security:session_secret",
                passed=False,
                message=f"SESSION_SECRET too short ({len(secret)} chars, need 32+)",
                severity=self._severity(),
                remediation="Use at least 32 characters for SESSION_SECRET"
            ))
        else:
            self.report.add_validation(ValidationResult(
                name="security:session_secret",
                passed=True,
                message="SESSION_SECRET meets length requirements"
            ))

    def validate_database_connection(self) -> None:
        if not self.app.config.get('SQLALCHEMY_DATABASE_URI'):
            self.report.add_validation(ValidationResult(
                name="db:connection",
                passed=False,
                message="DATABASE_URL not configured",
                remediation="Set DATABASE_URL to a SQLAlchemy connection string"
            ))
            return

        try:
            self.session.execute(text("SELECT 1"))
            self.session.rollback()
            self.report.add_validation(ValidationResult(
                name="db:connection",
                passed=True,
                message="Database connection successful"
            ))
        except SQLAlchemyError as e:
            self.session.rollback()
            self.report.add_validation(ValidationResult(
                name="db:connection",
                passed=False,
                message=f"Database connection failed: {str(e)[:100]}",
                remediation="Check DATABASE_URL and ensure the database is reachable"
            ))

    def validate_admin_credentials(self) -> None:
        uses_default = (
            not self.app.config.get('ADMIN_PASSWORD_HASH')
            and self.app.config.get('ADMIN_PASSWORD') == DEV_ADMIN_PASSWORD
        )
        self.report.add_validation(ValidationResult(
            name="security:admin_password",
            passed=not uses_default,
            message="Admin account uses the development password" if uses_default else "Admin password configured",
            severity=self._severity() if uses_default else "info",
            remediation="Set ADMIN_PASSWORD_HASH (werkzeug generate_password_hash)" if uses_default else None
        ))

    def validate_listing_defaults(self) -> None:
        size = self.app.config.get('TASKS_DEFAULT_PAGE_SIZE', 0)
        limit = self.app.config.get('TASKS_MAX_PAGE_SIZE', 100)
        passed = 0 < size <= limit
        self.report.add_validation(ValidationResult(
            name="config:page_size",
            passed=passed,
            message=f"TASKS_DEFAULT_PAGE_SIZE={size}" if passed else f"TASKS_DEFAULT_PAGE_SIZE={size} is outside 1..{limit}",
            severity="info" if passed else "error",
            remediation=None if passed else f"Set TASKS_DEFAULT_PAGE_SIZE between 1 and {limit}"
        ))

    def run_all_validations(self) -> StartupReport:
        logger.info(f"Startup validation, environment: {self.report.environment}")

        self.validate_secret_key()
        self.validate_database_connection()
        self.validate_admin_credentials()
        self.validate_listing_defaults()

        self.report.ready_for_production = not self.report.has_critical_failures()

        summary = self.report.to_dict()["summary"]
        logger.info(f"Validations: {summary['passed']}/{summary['total_validations']} passed")
        for v in self.report.validations:
            if not v.passed:
                log = logger.error if v.severity == "error" else logger.warning
                log(f"  - {v.name}: {v.message}")
                if v.remediation:
                    log(f"    Fix: {v.remediation}")

        return self.report

    def fail_if_not_ready(self) -> None:
        """Raise in production when a critical check failed; only log in development."""
        if self.report.ready_for_production:
            return
        if self.is_production():
            logger.critical("Application cannot start - critical configuration missing")
            raise RuntimeError("Startup validation failed")
        logger.warning("Development mode: continuing despite validation failures")


def run_startup_validation(app, session) -> StartupReport:
    validator = StartupValidator(app, session)
    report = validator.run_all_validations()
    validator.fail_if_not_ready()
    return report
