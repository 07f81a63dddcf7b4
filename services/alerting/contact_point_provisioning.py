"""
File provisioning of contact points. Parses provisioning YAML documents and applies them through the contact point service with file provenance, so receivers declared in files cannot be changed through the API afterwards.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import glob
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from config import config
from models.alerting.contact_points import EmbeddedContactPoint
from models.alerting.provenance import Provenance
from services.alerting.contact_points import ContactPointService
from services.alerting.errors import (
    ContactPointNotFoundError,
    DuplicateIdentityError,
    ProvenanceViolationError,
)

logger = logging.getLogger(__name__)

SUPPORTED_API_VERSIONS = {1}


class ProvisioningError(ValueError):
    pass


class ProvisionedReceiver(BaseModel):
    uid: str = Field(..., min_length=1)
    type: str
    settings: Dict[str, Any] = Field(default_factory=dict)
    disable_resolve_message: bool = Field(False, alias="disableResolveMessage")
    model_config = ConfigDict(populate_by_name=True)


class ProvisionedContactPoint(BaseModel):
    org_id: int = Field(config.DEFAULT_ORG_ID, alias="orgId")
    name: str = Field(..., min_length=1)
    receivers: List[ProvisionedReceiver] = Field(default_factory=list)
    model_config = ConfigDict(populate_by_name=True)


class DeletedContactPoint(BaseModel):
    org_id: int = Field(config.DEFAULT_ORG_ID, alias="orgId")
    uid: str = Field(..., min_length=1)
    model_config = ConfigDict(populate_by_name=True)


class ContactPointProvisioningFile(BaseModel):
    api_version: int = Field(1, alias="apiVersion")
    contact_points: List[ProvisionedContactPoint] = Field(default_factory=list, alias="contactPoints")
    delete_contact_points: List[DeletedContactPoint] = Field(default_factory=list, alias="deleteContactPoints")
    model_config = ConfigDict(populate_by_name=True)


@dataclass
class ProvisioningResult:
    created: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def parse_contact_points_yaml(yaml_content: str) -> ContactPointProvisioningFile:
    if not (yaml_content or "").strip():
        raise ProvisioningError("YAML content is required")

    try:
        parsed = yaml.safe_load(yaml_content)
    except yaml.YAMLError as exc:
        raise ProvisioningError(f"Failed to parse YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ProvisioningError("Expected a mapping at the top level of the provisioning file")

    try:
        document = ContactPointProvisioningFile.model_validate(parsed)
    except PydanticValidationError as exc:
        raise ProvisioningError(f"Invalid contact point provisioning file: {exc}") from exc

    if document.api_version not in SUPPORTED_API_VERSIONS:
        raise ProvisioningError(f"Unsupported apiVersion {document.api_version}")
    return document


def _apply_receiver(
    service: ContactPointService,
    org_id: int,
    contact_point: EmbeddedContactPoint,
    result: ProvisioningResult,
) -> None:
    try:
        service.create_contact_point(org_id, contact_point, Provenance.FILE)
        result.created.append(contact_point.uid)
        return
    except DuplicateIdentityError:
        pass

    try:
        service.update_contact_point(org_id, contact_point, Provenance.FILE)
        result.updated.append(contact_point.uid)
    except ProvenanceViolationError as exc:
        if exc.current != Provenance.FILE:
            raise
        logger.info("Contact point %s in org %s is already provisioned from file; skipping", contact_point.uid, org_id)
        result.skipped.append(contact_point.uid)


def apply_contact_point_provisioning(
    service: ContactPointService,
    document: ContactPointProvisioningFile,
    result: Optional[ProvisioningResult] = None,
) -> ProvisioningResult:
    result = result or ProvisioningResult()

    for deletion in document.delete_contact_points:
        try:
            service.delete_contact_point(deletion.org_id, deletion.uid)
            result.deleted.append(deletion.uid)
        except ContactPointNotFoundError:
            logger.debug("Contact point %s in org %s already absent", deletion.uid, deletion.org_id)

    for provisioned in document.contact_points:
        for receiver in provisioned.receivers:
            contact_point = EmbeddedContactPoint(
                uid=receiver.uid,
                name=provisioned.name,
                type=receiver.type,
                settings=dict(receiver.settings),
                disableResolveMessage=receiver.disable_resolve_message,
            )
            _apply_receiver(service, provisioned.org_id, contact_point, result)

    return result


def provision_contact_points_from_directory(service: ContactPointService, directory: str) -> ProvisioningResult:
    result = ProvisioningResult()
    paths = sorted(glob.glob(os.path.join(directory, "*.yaml")) + glob.glob(os.path.join(directory, "*.yml")))
    for path in paths:
        with open(path, encoding="utf-8") as f:
            content = f.read()
        try:
            document = parse_contact_points_yaml(content)
        except ProvisioningError as exc:
            raise ProvisioningError(f"{path}: {exc}") from exc
        apply_contact_point_provisioning(service, document, result)
        logger.info("Applied contact point provisioning file %s", path)
    return result
