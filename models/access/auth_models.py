"""
This module defines Pydantic models for the requester identity and the permission that gates reading decrypted secure settings.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class Role(str, Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class Permission(str, Enum):
    READ_PROVISIONING_SECRETS = "alert.provisioning.secrets:read"


ROLE_PERMISSIONS = {
    Role.ADMIN: list(Permission),
    Role.EDITOR: [],
    Role.VIEWER: [],
}


class TokenData(BaseModel):
    user_id: str = ""
    username: str = ""
    org_id: int = 0
    role: Role = Role.VIEWER
    is_superuser: bool = False
    permissions: List[str] = Field(default_factory=list)
