"""
Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

try:
    from ._env import ensure_test_env
except ImportError:
    from tests._env import ensure_test_env
ensure_test_env()

import base64

import pytest

from database import get_db_session
from models.access.auth_models import Permission, Role, TokenData
from models.alerting.contact_points import ContactPointQuery, EmbeddedContactPoint
from models.alerting.provenance import Provenance
from services.alerting.contact_points import ContactPointService
from services.alerting.errors import PermissionDeniedError
from services.common.access import RoleBasedAccessControl
from services.storage.alerting_config import AlertingConfigStore
from services.storage.transactions import SessionTransactionManager
from tests.conftest import TEST_ORG_ID, slack_receiver_config

REDACTED = "[REDACTED]"


class SpyEncryption:
    def __init__(self, inner):
        self.inner = inner
        self.decrypt_calls = 0

    def encrypt(self, payload: bytes) -> bytes:
        return self.inner.encrypt(payload)

    def decrypt(self, payload: bytes) -> bytes:
        self.decrypt_calls += 1
        return self.inner.decrypt(payload)


@pytest.fixture
def spy(encryption):
    return SpyEncryption(encryption)


@pytest.fixture
def spy_service(seed_config, spy, config_store, provenance_store):
    seed_config(slack_receiver_config())
    return ContactPointService(
        config_store=config_store,
        provenance_store=provenance_store,
        xact=SessionTransactionManager(),
        encryption_service=spy,
        access_control=RoleBasedAccessControl(),
    )


def _query(decrypt: bool = False) -> ContactPointQuery:
    return ContactPointQuery(orgId=TEST_ORG_ID, decrypt=decrypt)


def test_secrets_are_redacted_by_default(spy_service, spy):
    cps = spy_service.get_contact_points(_query())

    assert cps[0].settings == {"recipient": "#alerts", "url": REDACTED}
    assert spy.decrypt_calls == 0


def test_secrets_are_stored_encrypted(spy_service, encryption):
    with get_db_session() as db:
        receiver = AlertingConfigStore().fetch_latest(db, TEST_ORG_ID).config.receivers[0].receivers[0]

    assert "url" not in receiver.settings
    stored = receiver.secure_settings["url"]
    assert stored != "secure url"
    assert encryption.decrypt(base64.b64decode(stored)) == b"secure url"


@pytest.mark.parametrize(
    "requester",
    [
        None,
        TokenData(user_id="viewer", org_id=TEST_ORG_ID, role=Role.VIEWER),
        TokenData(user_id="editor", org_id=TEST_ORG_ID, role=Role.EDITOR),
        TokenData(user_id="other-org-admin", org_id=TEST_ORG_ID + 1, role=Role.ADMIN),
    ],
    ids=["anonymous", "viewer", "editor", "other-org"],
)
def test_decrypt_without_secrets_permission_is_denied(spy_service, spy, requester):
    with pytest.raises(PermissionDeniedError):
        spy_service.get_contact_points(_query(decrypt=True), requester)

    assert spy.decrypt_calls == 0


@pytest.mark.parametrize(
    "requester",
    [
        TokenData(user_id="admin", org_id=TEST_ORG_ID, role=Role.ADMIN),
        TokenData(
            user_id="provisioner",
            org_id=TEST_ORG_ID,
            role=Role.VIEWER,
            permissions=[Permission.READ_PROVISIONING_SECRETS.value],
        ),
        TokenData(user_id="root", org_id=TEST_ORG_ID + 1, is_superuser=True),
    ],
    ids=["admin", "explicit-permission", "superuser"],
)
def test_decrypt_with_secrets_permission_returns_cleartext(spy_service, spy, requester):
    cps = spy_service.get_contact_points(_query(decrypt=True), requester)

    assert cps[0].settings == {"recipient": "#alerts", "url": "secure url"}
    assert spy.decrypt_calls == 1


def test_created_contact_point_is_returned_redacted(spy_service):
    created = spy_service.create_contact_point(
        TEST_ORG_ID,
        EmbeddedContactPoint(name="team", type="slack", settings={"recipient": "#team", "token": "xoxb-1"}),
        Provenance.API,
    )

    assert created.settings == {"recipient": "#team", "token": REDACTED}


@pytest.mark.parametrize(
    "settings",
    [
        {"recipient": "#renamed", "url": REDACTED},
        {"recipient": "#renamed"},
    ],
    ids=["placeholder", "omitted"],
)
def test_update_keeps_stored_secret_when_not_supplied(spy_service, settings):
    admin = TokenData(user_id="admin", org_id=TEST_ORG_ID, role=Role.ADMIN)
    cp = EmbeddedContactPoint(uid="slack-receiver-uid", name="slack receiver", type="slack", settings=settings)

    spy_service.update_contact_point(TEST_ORG_ID, cp, Provenance.API)

    cps = spy_service.get_contact_points(_query(decrypt=True), admin)
    assert cps[0].settings == {"recipient": "#renamed", "url": "secure url"}


def test_update_replaces_secret_when_new_value_supplied(spy_service):
    admin = TokenData(user_id="admin", org_id=TEST_ORG_ID, role=Role.ADMIN)
    cp = EmbeddedContactPoint(
        uid="slack-receiver-uid",
        name="slack receiver",
        type="slack",
        settings={"recipient": "#alerts", "url": "https://hooks.example.com/new"},
    )

    spy_service.update_contact_point(TEST_ORG_ID, cp, Provenance.API)

    cps = spy_service.get_contact_points(_query(decrypt=True), admin)
    assert cps[0].settings["url"] == "https://hooks.example.com/new"
