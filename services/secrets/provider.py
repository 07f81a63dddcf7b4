"""
Provider interfaces and implementations for secrets management. The SecretProvider protocol specifies methods for retrieving individual secrets by key as well as several at once. EnvSecretProvider reads the process environment; FileSecretProvider reads one file per key from a mounted secrets directory (the layout used by container orchestrators), which keeps the secure settings encryption key out of the environment.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import os
from typing import Optional, Protocol


class SecretProvider(Protocol):
    def get(self, key: str) -> Optional[str]: ...

class EnvSecretProvider:
    def get(self, key: str) -> Optional[str]:
        return os.environ.get(key) or None


class FileSecretProvider:
    def __init__(self, directory: str, fallback: Optional[SecretProvider] = None) -> None:
        self._directory = directory
        self._fallback = fallback

    def get(self, key: str) -> Optional[str]:
        path = os.path.join(self._directory, key)
        if os.path.isfile(path):
            with open(path) as f:
                value = f.read().strip()
            if value:
                return value
        if self._fallback is not None:
            return self._fallback.get(key)
        return None


def build_secret_provider() -> SecretProvider:
    secrets_dir = os.getenv("SECRETS_DIR", "").strip()
    if not secrets_dir:
        return EnvSecretProvider()
    return FileSecretProvider(secrets_dir, fallback=EnvSecretProvider())
