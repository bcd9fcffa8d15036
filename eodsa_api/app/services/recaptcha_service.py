"""
reCAPTCHA verification for the public registration routes.

A token is always required.  When ``RECAPTCHA_SECRET_KEY`` is set the
token is checked against Google's siteverify endpoint; any failure,
including network errors, rejects the registration.
"""

import logging
from typing import Optional

import httpx

from eodsa_api.app.core.config import settings
from eodsa_api.app.core.errors import ValidationError


logger = logging.getLogger(__name__)


class RecaptchaService:
    """Verify reCAPTCHA tokens submitted with registration forms."""

    @classmethod
    async def verify(cls, token: Optional[str], remote_ip: Optional[str] = None) -> None:
        """Raise ``ValidationError`` unless ``token`` is acceptable."""
        if not token:
            raise ValidationError("reCAPTCHA verification is required")
        if not settings.recaptcha_secret_key:
            logger.debug("RECAPTCHA_SECRET_KEY not set, accepting token without remote check")
            return

        data = {"secret": settings.recaptcha_secret_key, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(settings.recaptcha_verify_url, data=data, timeout=10.0)
                response.raise_for_status()
                result = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("reCAPTCHA verification request failed: %s", exc)
            raise ValidationError("reCAPTCHA verification failed") from exc

        if not result.get("success"):
            logger.info("reCAPTCHA rejected token: %s", result.get("error-codes"))
            raise ValidationError("reCAPTCHA verification failed")
