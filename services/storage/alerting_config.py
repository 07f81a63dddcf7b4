"""
Storage for the per-organization alerting configuration document. Reads return the document together with its content hash; writes must present the hash they read and are applied as a compare-and-swap, so a writer that lost a race is rejected instead of overwriting the winner.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from db_models import AlertConfiguration as AlertConfigurationDB
from models.alerting.contact_points import AlertingConfig, ConfigRevision
from services.alerting.errors import AlertingConfigNotFoundError, ConcurrencyConflictError
from services.storage.serializers import config_hash, deserialize_config, serialize_config

logger = logging.getLogger(__name__)


class AlertingConfigStore:
    def fetch_latest(self, db: Session, org_id: int) -> ConfigRevision:
        row = db.query(AlertConfigurationDB).filter(AlertConfigurationDB.org_id == org_id).first()
        if row is None:
            raise AlertingConfigNotFoundError(org_id)
        return ConfigRevision(
            config=deserialize_config(row.configuration),
            concurrency_token=row.configuration_hash,
            version=row.version,
        )

    def save(
        self,
        db: Session,
        org_id: int,
        cfg: AlertingConfig,
        expected_token: Optional[str],
    ) -> str:
        raw = serialize_config(cfg)
        new_token = config_hash(raw)

        if expected_token is None:
            exists = db.query(AlertConfigurationDB.id).filter(AlertConfigurationDB.org_id == org_id).first()
            if exists:
                raise ConcurrencyConflictError(org_id)
            db.add(AlertConfigurationDB(org_id=org_id, configuration=raw, configuration_hash=new_token, version=1))
            db.flush()
            logger.info("Stored initial alerting configuration for org %s", org_id)
            return new_token

        result = db.execute(
            update(AlertConfigurationDB)
            .where(
                AlertConfigurationDB.org_id == org_id,
                AlertConfigurationDB.configuration_hash == expected_token,
            )
            .values(
                configuration=raw,
                configuration_hash=new_token,
                version=AlertConfigurationDB.version + 1,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.warning("Rejected stale alerting configuration write for org %s", org_id)
            raise ConcurrencyConflictError(org_id)
        return new_token

    def ensure_default(self, db: Session, org_id: int, default: AlertingConfig) -> bool:
        exists = db.query(AlertConfigurationDB.id).filter(AlertConfigurationDB.org_id == org_id).first()
        if exists:
            return False
        self.save(db, org_id, default, expected_token=None)
        return True
