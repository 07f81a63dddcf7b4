"""
Storage for provenance records keyed by organization, record type and record key. A record that was never written reads as no provenance.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Dict

from sqlalchemy.orm import Session

from db_models import ProvenanceRecord as ProvenanceRecordDB
from models.alerting.provenance import Provenance, parse_provenance

logger = logging.getLogger(__name__)

CONTACT_POINT_RECORD_TYPE = "contactPoint"


class ProvenanceStore:
    def __init__(self, record_type: str = CONTACT_POINT_RECORD_TYPE) -> None:
        self.record_type = record_type

    def _query(self, db: Session, org_id: int):
        return db.query(ProvenanceRecordDB).filter(
            ProvenanceRecordDB.org_id == org_id,
            ProvenanceRecordDB.record_type == self.record_type,
        )

    def get(self, db: Session, org_id: int, key: str, for_update: bool = False) -> Provenance:
        query = self._query(db, org_id).filter(ProvenanceRecordDB.record_key == key)
        if for_update:
            query = query.with_for_update()
        row = query.first()
        return parse_provenance(row.provenance) if row else Provenance.NONE

    def get_all(self, db: Session, org_id: int) -> Dict[str, Provenance]:
        return {row.record_key: parse_provenance(row.provenance) for row in self._query(db, org_id).all()}

    def set(self, db: Session, org_id: int, key: str, provenance: Provenance) -> None:
        row = self._query(db, org_id).filter(ProvenanceRecordDB.record_key == key).first()
        if row is None:
            db.add(ProvenanceRecordDB(
                org_id=org_id,
                record_type=self.record_type,
                record_key=key,
                provenance=provenance.value,
            ))
        else:
            row.provenance = provenance.value
        db.flush()

    def delete(self, db: Session, org_id: int, key: str) -> bool:
        deleted = self._query(db, org_id).filter(ProvenanceRecordDB.record_key == key).delete(
            synchronize_session=False
        )
        return bool(deleted)
