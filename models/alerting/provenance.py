"""
Provenance of a contact point: the authority allowed to manage it. A contact point starts without provenance and may be claimed exactly once, by the API or by file provisioning; after that the management channel is fixed.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from enum import Enum
from typing import FrozenSet, Tuple


class Provenance(str, Enum):
    NONE = ""
    API = "api"
    FILE = "file"

    def __str__(self) -> str:
        return self.value or "none"


# (current, requested) pairs that a write may perform.
ALLOWED_PROVENANCE_TRANSITIONS: FrozenSet[Tuple[Provenance, Provenance]] = frozenset({
    (Provenance.NONE, Provenance.API),
    (Provenance.NONE, Provenance.FILE),
})


def parse_provenance(value: object) -> Provenance:
    if isinstance(value, Provenance):
        return value
    normalized = str(value or "").strip().lower()
    if normalized in ("", "none"):
        return Provenance.NONE
    return Provenance(normalized)


def can_transition(current: Provenance, requested: Provenance) -> bool:
    return (current, requested) in ALLOWED_PROVENANCE_TRANSITIONS
