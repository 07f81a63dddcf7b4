"""
Entrypoint for the contact point service: initializes the database, seeds the default alerting configuration for the default organization and applies contact point provisioning files.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Optional

from config import config
from database import connection_test, dispose_database, get_db_session, init_database, init_db
from services.alerting.contact_point_provisioning import (
    ProvisioningResult,
    provision_contact_points_from_directory,
)
from services.alerting.contact_points import build_contact_point_service
from services.alerting.default_config import default_alerting_config
from services.alerting.secure_settings import encrypt_plaintext_secure_settings
from services.common.encryption import FernetEncryptionService
from services.storage.alerting_config import AlertingConfigStore

logger = logging.getLogger("contactpoints")


def bootstrap(provisioning_path: Optional[str] = None) -> ProvisioningResult:
    init_database(config.DATABASE_URL, config.DB_ECHO)
    if not connection_test():
        raise RuntimeError("Database is not reachable")
    init_db()

    default = default_alerting_config()
    encryption = FernetEncryptionService()
    encrypted_fields = encrypt_plaintext_secure_settings(default, encryption.encrypt, encryption.decrypt)
    if encrypted_fields:
        logger.debug("Encrypted %d secure field(s) of the default configuration", len(encrypted_fields))

    with get_db_session() as db:
        if AlertingConfigStore().ensure_default(db, config.DEFAULT_ORG_ID, default):
            logger.info("Seeded default alerting configuration for org %s", config.DEFAULT_ORG_ID)

    path = provisioning_path or config.CONTACT_POINTS_PROVISIONING_PATH
    if not path:
        logger.info("No contact point provisioning path configured")
        return ProvisioningResult()

    result = provision_contact_points_from_directory(build_contact_point_service(), path)
    logger.info(
        "Contact point provisioning finished: created=%d updated=%d deleted=%d skipped=%d",
        len(result.created), len(result.updated), len(result.deleted), len(result.skipped),
    )
    return result


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        bootstrap()
    finally:
        dispose_database()


if __name__ == "__main__":
    main()
