"""
Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT in sys.path:
    sys.path.remove(ROOT)
sys.path.insert(0, ROOT)

from tests._env import ensure_test_env

ensure_test_env()

import pytest
from cryptography.fernet import Fernet

import database as database_module
from config import config
from models.alerting.contact_points import AlertingConfig
from services.alerting.contact_points import ContactPointService
from services.alerting.secure_settings import encrypt_plaintext_secure_settings
from services.common.access import RoleBasedAccessControl
from services.common.encryption import FernetEncryptionService
from services.storage.alerting_config import AlertingConfigStore
from services.storage.provenance import ProvenanceStore
from services.storage.transactions import SessionTransactionManager

TEST_ORG_ID = 1


def slack_receiver_config() -> AlertingConfig:
    return AlertingConfig.model_validate({
        "route": {"receiver": "slack receiver"},
        "receivers": [
            {
                "name": "slack receiver",
                "grafana_managed_receiver_configs": [
                    {
                        "uid": "slack-receiver-uid",
                        "name": "slack receiver",
                        "type": "slack",
                        "settings": {"recipient": "#alerts"},
                        "secureSettings": {"url": "secure url"},
                    }
                ],
            }
        ],
    })


@pytest.fixture
def db_setup():
    database_module.init_database(config.DATABASE_URL)
    database_module.drop_db()
    database_module.init_db()
    yield
    database_module.drop_db()


@pytest.fixture
def encryption():
    return FernetEncryptionService(Fernet.generate_key().decode())


@pytest.fixture
def seed_config(db_setup, encryption):
    def _seed(cfg: AlertingConfig, org_id: int = TEST_ORG_ID) -> str:
        encrypt_plaintext_secure_settings(cfg, encryption.encrypt, encryption.decrypt)
        with database_module.get_db_session() as db:
            return AlertingConfigStore().save(db, org_id, cfg, expected_token=None)
    return _seed


@pytest.fixture
def config_store():
    return AlertingConfigStore()


@pytest.fixture
def provenance_store():
    return ProvenanceStore()


@pytest.fixture
def make_service(seed_config, encryption, config_store, provenance_store):
    def _make(cfg: AlertingConfig = None, store: AlertingConfigStore = None) -> ContactPointService:
        seed_config(cfg if cfg is not None else slack_receiver_config())
        return ContactPointService(
            config_store=store or config_store,
            provenance_store=provenance_store,
            xact=SessionTransactionManager(),
            encryption_service=encryption,
            access_control=RoleBasedAccessControl(),
        )
    return _make


@pytest.fixture
def service(make_service):
    return make_service()
