"""
Helpers for moving secure receiver settings in and out of their encrypted form. Which keys are secure is decided by the notifier field registry, never by the caller. Stored secure values are base64 encoded ciphertext produced by the encryption service.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import base64
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from models.alerting.contact_points import AlertingConfig, ReceiverEntry
from services.alerting.notifier_fields import secure_keys_for

EncryptFn = Callable[[bytes], bytes]
DecryptFn = Callable[[bytes], bytes]


def _normalize_secret_value(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def encrypt_secure_value(value: Any, encrypt: EncryptFn) -> str:
    return base64.b64encode(encrypt(str(value).encode("utf-8"))).decode("ascii")


def decrypt_secure_value(value: str, decrypt: DecryptFn) -> str:
    try:
        raw = base64.b64decode(value.encode("ascii"), validate=True)
    except (ValueError, UnicodeEncodeError) as exc:
        raise ValueError("Secure setting is not valid base64") from exc
    return decrypt(raw).decode("utf-8")


def extract_secure_settings(
    notifier_type: str,
    settings: Dict[str, Any],
    encrypt: EncryptFn,
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    secure_keys = secure_keys_for(notifier_type)
    plain: Dict[str, Any] = {}
    secure: Dict[str, str] = {}
    for key, value in settings.items():
        if key not in secure_keys:
            plain[key] = value
            continue
        normalized = _normalize_secret_value(value)
        if normalized is None:
            continue
        secure[key] = encrypt_secure_value(normalized, encrypt)
    return plain, secure


def merge_secure_settings(
    notifier_type: str,
    settings: Dict[str, Any],
    existing_secure: Dict[str, str],
    redacted_value: str,
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    Work out which stored secure values an update keeps.

    A secure key that the update omits, or sends back as the redacted
    placeholder, keeps its stored ciphertext. Returns the settings with those
    placeholders removed and the ciphertexts carried over.
    """
    remaining = dict(settings)
    carried: Dict[str, str] = {}
    for key in secure_keys_for(notifier_type):
        if key in remaining and remaining[key] != redacted_value:
            continue
        remaining.pop(key, None)
        if key in existing_secure:
            carried[key] = existing_secure[key]
    return remaining, carried


def decrypt_secure_settings(secure: Dict[str, str], decrypt: DecryptFn) -> Dict[str, str]:
    return {key: decrypt_secure_value(value, decrypt) for key, value in secure.items()}


def redact_settings(settings: Dict[str, Any], secure_keys: Iterable[str], redacted_value: str) -> Dict[str, Any]:
    redacted = dict(settings)
    for key in secure_keys:
        redacted[key] = redacted_value
    return redacted


def _is_ciphertext(value: str, decrypt: DecryptFn) -> bool:
    try:
        decrypt_secure_value(value, decrypt)
    except ValueError:
        return False
    return True


def encrypt_plaintext_secure_settings(
    cfg: AlertingConfig,
    encrypt: EncryptFn,
    decrypt: DecryptFn,
    *,
    path_prefix: str = "receivers",
) -> List[str]:
    """
    Encrypt, in place, secure values of `cfg` that are still plaintext.

    Secure keys found in `settings` move to `secure_settings`. Values already in
    `secure_settings` are encrypted only when they do not decrypt with the
    current key, so running this over a stored document is idempotent.
    Returns the paths of the fields that were encrypted.
    """
    changed_fields: List[str] = []
    for group in cfg.receivers:
        for receiver in group.receivers:
            plain, encrypted = extract_secure_settings(receiver.type, dict(receiver.settings or {}), encrypt)
            secure: Dict[str, str] = {}
            for key, value in receiver.secure_settings.items():
                normalized = _normalize_secret_value(value)
                if normalized is None:
                    continue
                if _is_ciphertext(normalized, decrypt):
                    secure[key] = normalized
                else:
                    secure[key] = encrypt_secure_value(normalized, encrypt)
                    encrypted.setdefault(key, secure[key])
            if not encrypted and len(secure) == len(receiver.secure_settings):
                continue
            changed_fields.extend(f"{path_prefix}[{receiver.uid}].{key}" for key in sorted(encrypted))
            if receiver.settings is not None:
                receiver.settings = plain
            receiver.secure_settings = {**secure, **encrypted}
    return changed_fields


def present_settings(
    receiver: ReceiverEntry,
    redacted_value: str,
    decrypt: Optional[DecryptFn] = None,
) -> Optional[Dict[str, Any]]:
    """Settings of a stored receiver as shown to a caller: decrypted when `decrypt` is given, redacted otherwise."""
    if receiver.settings is None and not receiver.secure_settings:
        return None
    settings = dict(receiver.settings or {})
    if decrypt is None:
        return redact_settings(settings, receiver.secure_settings.keys(), redacted_value)
    settings.update(decrypt_secure_settings(receiver.secure_settings, decrypt))
    return settings
