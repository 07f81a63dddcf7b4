"""
Configuration management for the contact point service, loading settings from environment variables with support for defaults, type conversion, and validation. This module defines a `Config` class that encapsulates the database connection, secure settings encryption key, redaction placeholder, enabled notifier types and the file provisioning directory. Defaults favour local development; production environments must supply a real encryption key.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
import os
from typing import Optional, List

from cryptography.fernet import Fernet

from services.secrets.provider import SecretProvider, build_secret_provider

logger = logging.getLogger(__name__)


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _to_list(value: Optional[str], default: Optional[List[str]] = None) -> List[str]:
    if value is None:
        return default or []
    parsed = [item.strip() for item in value.split(",") if item.strip()]
    return parsed if parsed else (default or [])


def _is_placeholder(value: Optional[str], placeholders: List[str]) -> bool:
    if value is None:
        return True
    normalized = value.strip()
    return not normalized or normalized in placeholders


def _is_valid_fernet_key(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        Fernet(value)
    except (ValueError, TypeError):
        return False
    return True


def _env_name() -> str:
    return (os.getenv("APP_ENV") or os.getenv("ENVIRONMENT") or "development").strip().lower()


def _is_production_env() -> bool:
    return _env_name() in {"prod", "production"}


class Config:
    DEFAULT_DATABASE_URL = "sqlite:///./contactpoints.db"

    def __init__(self) -> None:
        self.APP_ENV: str = _env_name()
        self.IS_PRODUCTION: bool = _is_production_env()
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "info")

        self._secret_provider: SecretProvider = build_secret_provider()

        # Database
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", self.DEFAULT_DATABASE_URL)
        self.DB_ECHO: bool = _to_bool(os.getenv("DB_ECHO"), default=False)
        self.DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
        self.DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "20"))
        self.DB_POOL_TIMEOUT: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
        self.DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "1800"))

        # Encryption key for secure receiver settings at rest
        self.DATA_ENCRYPTION_KEY: Optional[str] = os.getenv("DATA_ENCRYPTION_KEY") or self.get_secret("DATA_ENCRYPTION_KEY")

        # Multi-tenancy
        self.DEFAULT_ORG_ID: int = int(os.getenv("DEFAULT_ORG_ID", "1"))

        # Contact points
        self.REDACTED_VALUE: str = os.getenv("REDACTED_VALUE", "[REDACTED]")
        self.MAX_CONTACT_POINT_UID_LENGTH: int = int(os.getenv("MAX_CONTACT_POINT_UID_LENGTH", "40"))
        self.ENABLED_NOTIFIER_TYPES: List[str] = [
            notifier_type.lower() for notifier_type in _to_list(os.getenv("ENABLED_NOTIFIER_TYPES"))
        ]
        self.CONTACT_POINTS_PROVISIONING_PATH: Optional[str] = (
            os.getenv("CONTACT_POINTS_PROVISIONING_PATH", "").strip() or None
        )

        self._apply_security_defaults()
        self.validate()

    def get_secret(self, key: str) -> Optional[str]:
        val = getattr(self, key, None)
        if val:
            return val

        try:
            return self._secret_provider.get(key)
        except Exception:
            return None

    def _apply_security_defaults(self) -> None:
        if _is_placeholder(self.DATA_ENCRYPTION_KEY, placeholders=["changeme", "replace_with_fernet_key"]):
            if not self.IS_PRODUCTION:
                self.DATA_ENCRYPTION_KEY = Fernet.generate_key().decode()
                logger.warning(
                    "Generated ephemeral DATA_ENCRYPTION_KEY for non-production startup. Secure settings stored with it cannot be decrypted after restart.",
                )

    def validate(self) -> None:
        if self.IS_PRODUCTION and not _is_valid_fernet_key(self.DATA_ENCRYPTION_KEY):
            raise ValueError("DATA_ENCRYPTION_KEY must be a valid Fernet key in production")

        if self.IS_PRODUCTION and self.DATABASE_URL == self.DEFAULT_DATABASE_URL:
            raise ValueError("DATABASE_URL must be configured explicitly in production")

        if not self.REDACTED_VALUE:
            raise ValueError("REDACTED_VALUE must not be empty")

        if self.MAX_CONTACT_POINT_UID_LENGTH < 1:
            raise ValueError("MAX_CONTACT_POINT_UID_LENGTH must be positive")


config = Config()
