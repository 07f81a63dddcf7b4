"""
Access control decisions for org-scoped requesters. Only the yes/no answer is consumed by the contact point service; a missing requester or one scoped to another organization is always denied.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Optional, Protocol

from models.access.auth_models import Permission, ROLE_PERMISSIONS, TokenData

logger = logging.getLogger(__name__)


class AccessControl(Protocol):
    def has_permission(self, requester: Optional[TokenData], permission: Permission, org_id: int) -> bool: ...


def _granted_permissions(requester: TokenData) -> set[str]:
    granted = {str(p) for p in (requester.permissions or [])}
    granted.update(p.value for p in ROLE_PERMISSIONS.get(requester.role, []))
    return granted


class RoleBasedAccessControl:
    def has_permission(self, requester: Optional[TokenData], permission: Permission, org_id: int) -> bool:
        if requester is None:
            return False
        if requester.is_superuser:
            return True
        if requester.org_id != org_id:
            logger.debug(
                "Denying %s for user %s: requester org %s does not match %s",
                permission.value, requester.user_id, requester.org_id, org_id,
            )
            return False
        return permission.value in _granted_permissions(requester)
