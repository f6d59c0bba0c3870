"""
Bearer-token authentication dependencies.

The scheduled trigger is gated by CRON_SECRET; every other endpoint by
API_KEY. An unset secret fails closed.
"""

import hmac
from typing import Optional

from fastapi import Header

from knowledge_hub.config import config
from knowledge_hub.utils.error_handling import AuthError, ConfigurationError
from knowledge_hub.utils.logger import logging

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthError("Missing authorization header")
    if not authorization.startswith(BEARER_PREFIX) or not authorization[len(BEARER_PREFIX):]:
        raise AuthError("Invalid authorization format. Use: Bearer <token>")
    return authorization[len(BEARER_PREFIX):]


def verify_token(token: str, secret: Optional[str], setting: str, error_message: str) -> None:
    if not secret:
        logging.error(f"{setting} environment variable is not set")
        raise ConfigurationError("Server configuration error")
    if not hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8")):
        raise AuthError(error_message)


async def require_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """Dependency for the scheduled ingestion trigger."""
    token = extract_bearer_token(authorization)
    verify_token(token, config.CRON_SECRET, "CRON_SECRET", "Invalid cron secret")


async def require_api_key(authorization: Optional[str] = Header(default=None)) -> None:
    """Dependency for API endpoints and the ad-hoc ingestion trigger."""
    token = extract_bearer_token(authorization)
    verify_token(token, config.API_KEY, "API_KEY", "Invalid API key")
