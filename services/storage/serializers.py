"""
Serializers for the alerting configuration document: canonical JSON for storage, the content hash used as the concurrency token, and conversion of stored receivers into the contact point view returned to callers.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import hashlib
import json
from typing import Any, Dict, Optional

from models.alerting.contact_points import AlertingConfig, EmbeddedContactPoint, ReceiverEntry
from models.alerting.provenance import Provenance


def config_to_payload(cfg: AlertingConfig) -> Dict[str, Any]:
    return cfg.model_dump(by_alias=True, exclude_none=True)


def serialize_config(cfg: AlertingConfig) -> str:
    return json.dumps(config_to_payload(cfg), sort_keys=True, separators=(",", ":"), default=str)


def deserialize_config(raw: str) -> AlertingConfig:
    return AlertingConfig.model_validate(json.loads(raw))


def config_hash(raw: str) -> str:
    return hashlib.md5(raw.encode("utf-8")).hexdigest()


def receiver_to_contact_point(
    receiver: ReceiverEntry,
    settings: Optional[Dict[str, Any]],
    provenance: Provenance,
) -> EmbeddedContactPoint:
    return EmbeddedContactPoint(
        uid=receiver.uid,
        name=receiver.name,
        type=receiver.type,
        settings=settings,
        disableResolveMessage=receiver.disable_resolve_message,
        provenance=provenance,
    )
