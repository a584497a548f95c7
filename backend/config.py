"""
Service configuration.

Values come from the environment (with .env support) and are collected once
into a ServiceConfig that the app factory hands to each collaborator.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class ServiceConfig:
    database_url: Optional[str]
    jwt_secret: str
    token_expiration_minutes: int = 60
    admin_notify_email: Optional[str] = None
    base_url: str = "http://localhost:5050"
    resend_api_key: Optional[str] = None
    mail_from: str = "onboarding@resend.dev"
    db_statement_timeout_ms: int = 5000
    gateway_port: int = 5050


def load_config() -> ServiceConfig:
    """
    Build a ServiceConfig from environment variables.

    Raises:
        RuntimeError: If JWT_SECRET is not set.
    """
    load_dotenv()

    jwt_secret = os.getenv("JWT_SECRET")
    if not jwt_secret:
        raise RuntimeError("JWT_SECRET is missing. Set it in .env")

    return ServiceConfig(
        database_url=os.getenv("DATABASE_URL"),
        jwt_secret=jwt_secret,
        token_expiration_minutes=int(os.getenv("TOKEN_EXPIRATION_MINUTES", 60)),
        admin_notify_email=os.getenv("ADMIN_NOTIFY_EMAIL") or None,
        base_url=os.getenv("BASE_URL", "http://localhost:5050").rstrip("/"),
        resend_api_key=os.getenv("RESEND_API_KEY") or None,
        mail_from=os.getenv("MAIL_FROM", "onboarding@resend.dev"),
        db_statement_timeout_ms=int(os.getenv("DB_STATEMENT_TIMEOUT_MS", 5000)),
        gateway_port=int(os.getenv("GATEWAY_PORT", 5050)),
    )
