"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so the API starts with
no configuration at all: SQLite file next to the package, reCAPTCHA
verification and outgoing email disabled.  In a production deployment
override these via environment variables.
"""

import os
from dataclasses import dataclass


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "EODSA Competition API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Optional static token for operations tooling.  Requests carrying
    # this token in the Authorization header are treated as an
    # administrator without a judge account behind them.
    super_admin_static_token: str = os.getenv("SUPER_ADMIN_TOKEN", "")

    # Path to the SQLite database.  Relative paths are resolved against
    # the project root by ``core.db``.
    database_url: str = os.getenv("DATABASE_URL", "eodsa.db")

    # reCAPTCHA v2 server-side verification.  With an empty secret the
    # token is still required on registration but not verified remotely.
    recaptcha_secret_key: str = os.getenv("RECAPTCHA_SECRET_KEY", "")
    recaptcha_verify_url: str = os.getenv(
        "RECAPTCHA_VERIFY_URL", "https://www.google.com/recaptcha/api/siteverify"
    )

    # Per-IP limit applied to the dancer and studio registration routes,
    # in slowapi notation.  Counters live in process memory.
    registration_rate_limit: str = os.getenv("REGISTRATION_RATE_LIMIT", "3/hour")

    # When true, newly registered dancers skip the admin approval queue.
    auto_approve_dancers: bool = _flag("AUTO_APPROVE_DANCERS")

    # Outgoing mail.  Leave SMTP_HOST empty to disable sending; messages
    # are then only logged.
    smtp_host: str = os.getenv("SMTP_HOST", "")
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    smtp_username: str = os.getenv("SMTP_USERNAME", "")
    smtp_password: str = os.getenv("SMTP_PASSWORD", "")
    mail_from: str = os.getenv("MAIL_FROM", "noreply@eodsa.local")

    password_reset_expire_minutes: int = int(os.getenv("PASSWORD_RESET_EXPIRE_MINUTES", "60"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
