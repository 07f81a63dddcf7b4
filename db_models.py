"""
SQLAlchemy models for the contact point service, defining the schema for the per-organization alerting configuration document and the provenance records attached to contact points.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AlertConfiguration(Base):
    __tablename__ = "alert_configurations"

    id:                 Mapped[int]      = mapped_column(Integer,    primary_key=True, autoincrement=True)
    org_id:             Mapped[int]      = mapped_column(BigInteger, nullable=False, unique=True, index=True)
    configuration:      Mapped[str]      = mapped_column(Text,       nullable=False)
    configuration_hash: Mapped[str]      = mapped_column(String(32), nullable=False)
    version:            Mapped[int]      = mapped_column(Integer,    nullable=False, default=1)
    created_at:         Mapped[datetime] = mapped_column(DateTime,   default=_now, nullable=False)
    updated_at:         Mapped[datetime] = mapped_column(DateTime,   default=_now, onupdate=_now, nullable=False)


class ProvenanceRecord(Base):
    __tablename__ = "provenance_records"

    id:          Mapped[int]      = mapped_column(Integer,     primary_key=True, autoincrement=True)
    org_id:      Mapped[int]      = mapped_column(BigInteger,  nullable=False, index=True)
    record_type: Mapped[str]      = mapped_column(String(64),  nullable=False)
    record_key:  Mapped[str]      = mapped_column(String(190), nullable=False)
    provenance:  Mapped[str]      = mapped_column(String(20),  nullable=False, default="")
    updated_at:  Mapped[datetime] = mapped_column(DateTime,    default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("org_id", "record_type", "record_key", name="uq_provenance_record"),
        Index("idx_provenance_records_org_type", "org_id", "record_type"),
    )
