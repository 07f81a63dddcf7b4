"""
Error kinds raised by contact point management. Each failure is a distinct exception class so callers can match on it; none of them leaves the stored configuration or provenance partially written.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from models.alerting.provenance import Provenance


class ContactPointError(Exception):
    pass


class ValidationError(ContactPointError):
    pass


class ContactPointNotFoundError(ContactPointError):
    pass


class AlertingConfigNotFoundError(ContactPointNotFoundError):
    def __init__(self, org_id: int) -> None:
        super().__init__(f"no alerting configuration present in org {org_id}")
        self.org_id = org_id


class DuplicateIdentityError(ContactPointError):
    def __init__(self, uid: str) -> None:
        super().__init__(f"contact point with uid '{uid}' already exists")
        self.uid = uid


class PermissionDeniedError(ContactPointError):
    pass


class ProvenanceViolationError(ContactPointError):
    def __init__(self, current: Provenance, requested: Provenance) -> None:
        super().__init__(f"cannot change provenance from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class ConcurrencyConflictError(ContactPointError):
    def __init__(self, org_id: int) -> None:
        super().__init__(
            f"alerting configuration of org {org_id} was modified concurrently; fetch it again and retry"
        )
        self.org_id = org_id


class InUseError(ContactPointError):
    def __init__(self, name: str) -> None:
        super().__init__(f"contact point '{name}' is currently used by a notification policy")
        self.name = name
