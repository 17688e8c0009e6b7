"""
SQLAlchemy models for the alerting config syncer, defining the schema for alert groups, alert rules, notifiers, and the key/value secrets the generated Alertmanager configuration is published to.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import Boolean, DateTime, Index, Integer, JSON, LargeBinary, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AlertGroup(Base):
    __tablename__ = "alert_groups"

    id:                      Mapped[str]                  = mapped_column(String,      primary_key=True, default=_uuid)
    scope:                   Mapped[str]                  = mapped_column(String(20),  nullable=False, default="cluster", index=True)
    namespace:               Mapped[str]                  = mapped_column(String(200), nullable=False, index=True)
    name:                    Mapped[str]                  = mapped_column(String(200), nullable=False)
    display_name:            Mapped[Optional[str]]        = mapped_column(String(200))
    recipients:              Mapped[List[Dict[str, Any]]] = mapped_column(JSON,        default=list)
    group_wait_seconds:      Mapped[Optional[int]]        = mapped_column(Integer)
    group_interval_seconds:  Mapped[Optional[int]]        = mapped_column(Integer)
    repeat_interval_seconds: Mapped[Optional[int]]        = mapped_column(Integer)
    created_at:              Mapped[datetime]             = mapped_column(DateTime,    default=_now, nullable=False)
    updated_at:              Mapped[datetime]             = mapped_column(DateTime,    default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("scope", "namespace", "name", name="uq_alert_groups_scope_namespace_name"),
    )


class AlertRule(Base):
    __tablename__ = "alert_rules"

    id:                      Mapped[str]            = mapped_column(String,      primary_key=True, default=_uuid)
    scope:                   Mapped[str]            = mapped_column(String(20),  nullable=False, default="cluster", index=True)
    namespace:               Mapped[str]            = mapped_column(String(200), nullable=False, index=True)
    name:                    Mapped[str]            = mapped_column(String(200), nullable=False)
    group_name:              Mapped[str]            = mapped_column(String(400), nullable=False, index=True)
    project_name:            Mapped[Optional[str]]  = mapped_column(String(400))
    display_name:            Mapped[Optional[str]]  = mapped_column(String(200))
    severity:                Mapped[str]            = mapped_column(String(20),  nullable=False, default="critical")
    state:                   Mapped[str]            = mapped_column(String(20),  nullable=False, default="active", index=True)
    payload:                 Mapped[Dict[str, Any]] = mapped_column(JSON,        nullable=False)
    group_wait_seconds:      Mapped[Optional[int]]  = mapped_column(Integer)
    group_interval_seconds:  Mapped[Optional[int]]  = mapped_column(Integer)
    repeat_interval_seconds: Mapped[Optional[int]]  = mapped_column(Integer)
    created_at:              Mapped[datetime]       = mapped_column(DateTime,    default=_now, nullable=False)
    updated_at:              Mapped[datetime]       = mapped_column(DateTime,    default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("scope", "namespace", "name", name="uq_alert_rules_scope_namespace_name"),
        Index("idx_alert_rules_scope_state", "scope", "state"),
    )


class Notifier(Base):
    __tablename__ = "notifiers"

    id:           Mapped[str]            = mapped_column(String,      primary_key=True, default=_uuid)
    namespace:    Mapped[str]            = mapped_column(String(200), nullable=False, index=True)
    name:         Mapped[str]            = mapped_column(String(200), nullable=False)
    display_name: Mapped[Optional[str]]  = mapped_column(String(200))
    channel_type: Mapped[Optional[str]]  = mapped_column(String(20))
    config:       Mapped[Dict[str, Any]] = mapped_column(JSON,        default=dict)
    created_at:   Mapped[datetime]       = mapped_column(DateTime,    default=_now, nullable=False)
    updated_at:   Mapped[datetime]       = mapped_column(DateTime,    default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("namespace", "name", name="uq_notifiers_namespace_name"),
    )


class ConfigSecret(Base):
    __tablename__ = "config_secrets"

    id:         Mapped[str]      = mapped_column(String,      primary_key=True, default=_uuid)
    namespace:  Mapped[str]      = mapped_column(String(200), nullable=False)
    name:       Mapped[str]      = mapped_column(String(200), nullable=False)
    key:        Mapped[str]      = mapped_column(String(200), nullable=False)
    value:      Mapped[bytes]    = mapped_column(LargeBinary, nullable=False)
    encrypted:  Mapped[bool]     = mapped_column(Boolean,     default=False, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime,    default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("namespace", "name", "key", name="uq_config_secrets_namespace_name_key"),
    )
