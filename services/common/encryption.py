"""
Encryption utilities for symmetrically encrypting and decrypting secure receiver settings using Fernet encryption. Payloads are opaque bytes; callers decide how the ciphertext is stored.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
import logging
from typing import Optional, Protocol

from cryptography.fernet import Fernet, InvalidToken

from config import config as app_config

logger = logging.getLogger(__name__)


class EncryptionService(Protocol):
    def encrypt(self, payload: bytes) -> bytes: ...
    def decrypt(self, payload: bytes) -> bytes: ...


def _build_fernet(key: Optional[str]) -> Fernet:
    if not key:
        raise RuntimeError("DATA_ENCRYPTION_KEY is not configured")
    try:
        return Fernet(key)
    except (ValueError, TypeError) as exc:
        raise RuntimeError("Invalid DATA_ENCRYPTION_KEY format") from exc


class FernetEncryptionService:
    def __init__(self, key: Optional[str] = None) -> None:
        self._fernet = _build_fernet(key or app_config.DATA_ENCRYPTION_KEY)

    def encrypt(self, payload: bytes) -> bytes:
        try:
            return self._fernet.encrypt(payload)
        except Exception as exc:
            raise ValueError("Failed to encrypt secure setting") from exc

    def decrypt(self, payload: bytes) -> bytes:
        try:
            return self._fernet.decrypt(payload)
        except InvalidToken as exc:
            raise ValueError("Cannot decrypt secure setting - wrong key or corrupted data") from exc
        except Exception as exc:
            raise ValueError("Failed to decrypt secure setting") from exc
