"""
Contact point service: lists, creates, updates and deletes contact points stored in an organization's alerting configuration.

Every write reads the latest configuration together with its concurrency token, applies the change to that copy with the stitching algorithm, and saves the configuration and the provenance record in one transaction conditioned on the token it read. A writer that lost a race gets a ConcurrencyConflictError and is expected to retry from a fresh read. Secure settings are encrypted on the way in and only returned in cleartext to requesters holding the secrets read permission.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
import re
import uuid
from typing import List, Optional

from config import config
from models.access.auth_models import Permission, TokenData
from models.alerting.contact_points import (
    ConfigRevision,
    ContactPointQuery,
    EmbeddedContactPoint,
    ReceiverEntry,
)
from models.alerting.provenance import Provenance, can_transition
from services.alerting.errors import (
    ContactPointNotFoundError,
    DuplicateIdentityError,
    InUseError,
    PermissionDeniedError,
    ProvenanceViolationError,
    ValidationError,
)
from services.alerting.notifier_fields import validate_receiver_settings
from services.alerting.receiver_stitching import (
    find_receiver,
    is_contact_point_in_use,
    remove_receiver,
    stitch_receiver,
)
from services.alerting.secure_settings import (
    extract_secure_settings,
    merge_secure_settings,
    present_settings,
)
from services.common.access import AccessControl, RoleBasedAccessControl
from services.common.encryption import EncryptionService, FernetEncryptionService
from services.storage.alerting_config import AlertingConfigStore
from services.storage.provenance import ProvenanceStore
from services.storage.serializers import receiver_to_contact_point
from services.storage.transactions import SessionTransactionManager, TransactionManager

logger = logging.getLogger(__name__)

_UID_RE = re.compile(r"^[a-zA-Z0-9\-_]+$")


def _validate_contact_point(contact_point: EmbeddedContactPoint) -> None:
    errors: List[str] = []
    if not contact_point.name.strip():
        errors.append("name should not be empty")
    if not contact_point.type.strip():
        errors.append("type should not be empty")
    if not contact_point.settings:
        errors.append("settings should not be empty")
    if errors:
        raise ValidationError("; ".join(errors))


def _validate_uid(uid: str) -> None:
    if len(uid) > config.MAX_CONTACT_POINT_UID_LENGTH:
        raise ValidationError(f"uid must be at most {config.MAX_CONTACT_POINT_UID_LENGTH} characters")
    if not _UID_RE.match(uid):
        raise ValidationError("uid may only contain letters, digits, '-' and '_'")


def _validate_receiver(receiver: ReceiverEntry) -> None:
    if not receiver.settings and not receiver.secure_settings:
        raise ValidationError("settings should not be empty")
    errors = validate_receiver_settings(receiver.type, receiver.settings, receiver.secure_settings)
    if errors:
        raise ValidationError("; ".join(errors))


class ContactPointService:
    def __init__(
        self,
        config_store: AlertingConfigStore,
        provenance_store: ProvenanceStore,
        xact: TransactionManager,
        encryption_service: EncryptionService,
        access_control: AccessControl,
        redacted_value: Optional[str] = None,
    ) -> None:
        self._config_store = config_store
        self._provenance_store = provenance_store
        self._xact = xact
        self._encryption = encryption_service
        self._ac = access_control
        self._redacted_value = redacted_value or config.REDACTED_VALUE

    @staticmethod
    def _check_provenance(org_id: int, uid: str, current: Provenance, requested: Provenance) -> None:
        if can_transition(current, requested):
            return
        logger.warning(
            "Rejected provenance change of contact point %s in org %s from %s to %s",
            uid, org_id, current, requested,
        )
        raise ProvenanceViolationError(current, requested)

    def _fetch(self, org_id: int) -> ConfigRevision:
        with self._xact.in_transaction() as db:
            return self._config_store.fetch_latest(db, org_id)

    def get_contact_points(
        self,
        query: ContactPointQuery,
        requester: Optional[TokenData] = None,
    ) -> List[EmbeddedContactPoint]:
        if query.decrypt and not self._ac.has_permission(
            requester, Permission.READ_PROVISIONING_SECRETS, query.org_id
        ):
            raise PermissionDeniedError("requester is not allowed to read contact point secrets")

        with self._xact.in_transaction() as db:
            revision = self._config_store.fetch_latest(db, query.org_id)
            provenances = self._provenance_store.get_all(db, query.org_id)

        decrypt = self._encryption.decrypt if query.decrypt else None
        contact_points: List[EmbeddedContactPoint] = []
        for group in revision.config.receivers:
            for receiver in group.receivers:
                if query.name and receiver.name != query.name:
                    continue
                contact_points.append(receiver_to_contact_point(
                    receiver,
                    present_settings(receiver, self._redacted_value, decrypt),
                    provenances.get(receiver.uid, Provenance.NONE),
                ))
        return contact_points

    def create_contact_point(
        self,
        org_id: int,
        contact_point: EmbeddedContactPoint,
        provenance: Provenance,
    ) -> EmbeddedContactPoint:
        _validate_contact_point(contact_point)
        uid = contact_point.uid or str(uuid.uuid4())
        _validate_uid(uid)

        settings, secure_settings = extract_secure_settings(
            contact_point.type, dict(contact_point.settings or {}), self._encryption.encrypt
        )
        receiver = ReceiverEntry(
            uid=uid,
            name=contact_point.name,
            type=contact_point.type,
            disableResolveMessage=contact_point.disable_resolve_message,
            settings=settings,
            secureSettings=secure_settings,
        )
        _validate_receiver(receiver)

        revision = self._fetch(org_id)
        if find_receiver(revision.config, uid) is not None:
            raise DuplicateIdentityError(uid)
        stitch_receiver(revision.config, receiver)

        with self._xact.in_transaction() as db:
            self._config_store.save(db, org_id, revision.config, revision.concurrency_token)
            self._provenance_store.set(db, org_id, uid, provenance)

        logger.info("Created contact point %s (%s) in org %s", uid, receiver.name, org_id)
        return receiver_to_contact_point(
            receiver, present_settings(receiver, self._redacted_value), provenance
        )

    def update_contact_point(
        self,
        org_id: int,
        contact_point: EmbeddedContactPoint,
        provenance: Provenance,
    ) -> EmbeddedContactPoint:
        _validate_contact_point(contact_point)
        if not contact_point.uid:
            raise ValidationError("uid should not be empty")

        with self._xact.in_transaction() as db:
            revision = self._config_store.fetch_latest(db, org_id)
            stored_provenance = self._provenance_store.get(db, org_id, contact_point.uid)

        location = find_receiver(revision.config, contact_point.uid)
        if location is None:
            raise ContactPointNotFoundError(f"contact point with uid '{contact_point.uid}' not found")
        self._check_provenance(org_id, contact_point.uid, stored_provenance, provenance)

        group, idx = location
        existing = group.receivers[idx]
        remaining, carried = merge_secure_settings(
            contact_point.type, dict(contact_point.settings or {}), existing.secure_settings, self._redacted_value
        )
        settings, fresh = extract_secure_settings(contact_point.type, remaining, self._encryption.encrypt)
        receiver = ReceiverEntry(
            uid=contact_point.uid,
            name=contact_point.name,
            type=contact_point.type,
            disableResolveMessage=contact_point.disable_resolve_message,
            settings=settings,
            secureSettings={**carried, **fresh},
        )
        _validate_receiver(receiver)

        if not stitch_receiver(revision.config, receiver):
            logger.debug("Contact point %s in org %s unchanged; recording provenance only", receiver.uid, org_id)

        with self._xact.in_transaction() as db:
            self._config_store.save(db, org_id, revision.config, revision.concurrency_token)
            # a provenance-only write does not change the token; re-check under the config row lock
            current = self._provenance_store.get(db, org_id, receiver.uid, for_update=True)
            self._check_provenance(org_id, receiver.uid, current, provenance)
            self._provenance_store.set(db, org_id, receiver.uid, provenance)

        logger.info("Updated contact point %s (%s) in org %s", receiver.uid, receiver.name, org_id)
        return receiver_to_contact_point(
            receiver, present_settings(receiver, self._redacted_value), provenance
        )

    def delete_contact_point(self, org_id: int, uid: str) -> None:
        revision = self._fetch(org_id)
        removed = remove_receiver(revision.config, uid)
        if removed is None:
            raise ContactPointNotFoundError(f"contact point with uid '{uid}' not found")

        name, _ = removed
        if is_contact_point_in_use(name, [revision.config.route]):
            logger.warning("Refusing to delete contact point %s in org %s: %s is still routed to", uid, org_id, name)
            raise InUseError(name)

        with self._xact.in_transaction() as db:
            self._config_store.save(db, org_id, revision.config, revision.concurrency_token)
            self._provenance_store.delete(db, org_id, uid)

        logger.info("Deleted contact point %s (%s) in org %s", uid, name, org_id)


def build_contact_point_service() -> ContactPointService:
    return ContactPointService(
        config_store=AlertingConfigStore(),
        provenance_store=ProvenanceStore(),
        xact=SessionTransactionManager(),
        encryption_service=FernetEncryptionService(),
        access_control=RoleBasedAccessControl(),
    )
