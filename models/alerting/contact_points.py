"""
Module defines Pydantic models for the alerting configuration document (routing tree and receiver groups) and for contact points as they are exposed to callers.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .provenance import Provenance

DESC_ROUTE_RECEIVER = "Receiver group name notifications matching this route are sent to"
DESC_ROUTE_CHILDREN = "Nested routes"
DESC_RECEIVER_UID = "Unique identifier of the receiver across the configuration"
DESC_RECEIVER_NAME = "Name of the receiver group this receiver belongs to"
DESC_RECEIVER_TYPE = "Notifier kind, e.g. slack"
DESC_RECEIVER_SETTINGS = "Notifier settings"
DESC_RECEIVER_SECURE_SETTINGS = "Encrypted notifier settings, base64 encoded"
DESC_DISABLE_RESOLVE = "Do not notify when the alert resolves"
DESC_GROUP_NAME = "Receiver group name, referenced by routes"
DESC_GROUP_RECEIVERS = "Receivers in this group"
DESC_PROVENANCE = "Authority allowed to manage the contact point"


class Route(BaseModel):
    receiver: Optional[str] = Field(None, description=DESC_ROUTE_RECEIVER)
    routes: List[Route] = Field(default_factory=list, description=DESC_ROUTE_CHILDREN)
    model_config = ConfigDict(populate_by_name=True, extra="allow")


Route.model_rebuild()


class ReceiverEntry(BaseModel):
    uid: str = Field("", description=DESC_RECEIVER_UID)
    name: str = Field("", description=DESC_RECEIVER_NAME)
    type: str = Field("", description=DESC_RECEIVER_TYPE)
    disable_resolve_message: bool = Field(False, alias="disableResolveMessage", description=DESC_DISABLE_RESOLVE)
    settings: Optional[Dict[str, Any]] = Field(None, description=DESC_RECEIVER_SETTINGS)
    secure_settings: Dict[str, str] = Field(default_factory=dict, alias="secureSettings", description=DESC_RECEIVER_SECURE_SETTINGS)
    model_config = ConfigDict(populate_by_name=True)


class ReceiverGroup(BaseModel):
    name: str = Field(..., description=DESC_GROUP_NAME)
    receivers: List[ReceiverEntry] = Field(
        default_factory=list,
        alias="grafana_managed_receiver_configs",
        description=DESC_GROUP_RECEIVERS,
    )
    model_config = ConfigDict(populate_by_name=True)


class AlertingConfig(BaseModel):
    route: Optional[Route] = None
    receivers: List[ReceiverGroup] = Field(default_factory=list)
    templates: List[str] = Field(default_factory=list)
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class EmbeddedContactPoint(BaseModel):
    uid: str = ""
    name: str = ""
    type: str = ""
    settings: Optional[Dict[str, Any]] = None
    disable_resolve_message: bool = Field(False, alias="disableResolveMessage", description=DESC_DISABLE_RESOLVE)
    provenance: Provenance = Field(Provenance.NONE, description=DESC_PROVENANCE)
    model_config = ConfigDict(populate_by_name=True)


class ContactPointQuery(BaseModel):
    org_id: int = Field(..., alias="orgId")
    name: Optional[str] = None
    decrypt: bool = False
    model_config = ConfigDict(populate_by_name=True)


@dataclass
class ConfigRevision:
    config: AlertingConfig
    concurrency_token: str
    version: int
