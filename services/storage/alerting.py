"""
Database-backed storage for alerting definitions, providing the group, rule and notifier listers the config syncer reads from together with the upserts operators and tests use to populate them. Rows are converted into the Pydantic models the syncer consumes; notifier channel settings are encrypted at rest when an encryption key is configured and are decrypted on read.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, cast

from database import get_db_session
from db_models import AlertGroup as AlertGroupDB, AlertRule as AlertRuleDB, Notifier as NotifierDB
from models.alerting.groups import AlertGroup, Scope
from models.alerting.notifiers import Notifier
from models.alerting.rules import AlertRule, AlertState, RuleSeverity
from services.alerting.errors import NotFoundError
from services.common.encryption import decrypt_config, encrypt_config, encryption_enabled

logger = logging.getLogger(__name__)

_TIMING_FIELDS = ("group_wait_seconds", "group_interval_seconds", "repeat_interval_seconds")


def _group_to_pydantic(row: AlertGroupDB) -> AlertGroup:
    return AlertGroup(
        namespace=row.namespace,
        name=row.name,
        scope=row.scope,
        display_name=row.display_name,
        recipients=row.recipients or [],
        **{f: getattr(row, f) for f in _TIMING_FIELDS},
    )


def _rule_to_pydantic(row: AlertRuleDB) -> AlertRule:
    return AlertRule(
        namespace=row.namespace,
        name=row.name,
        scope=row.scope,
        group_name=row.group_name,
        project_name=row.project_name,
        display_name=row.display_name,
        severity=row.severity,
        state=row.state,
        payload=row.payload,
        **{f: getattr(row, f) for f in _TIMING_FIELDS},
    )


def _notifier_to_pydantic(row: NotifierDB) -> Notifier:
    data: Dict[str, Any] = {
        "namespace": row.namespace,
        "name": row.name,
        "display_name": row.display_name,
    }
    if row.channel_type:
        data[f"{row.channel_type}_config"] = decrypt_config(cast(Dict[str, Any], row.config or {}))
    return Notifier(**data)


class DbAlertGroupLister:
    def __init__(self, scope: Scope):
        self.scope = Scope(scope)

    def get(self, namespace: str, name: str) -> AlertGroup:
        with get_db_session() as db:
            row = db.query(AlertGroupDB).filter(
                AlertGroupDB.scope == self.scope.value,
                AlertGroupDB.namespace == namespace,
                AlertGroupDB.name == name,
            ).first()
            if row is None:
                raise NotFoundError(f"{self.scope.value} alert group {namespace}:{name} not found")
            return _group_to_pydantic(row)


class DbAlertRuleLister:
    def __init__(self, scope: Scope):
        self.scope = Scope(scope)

    def list(self) -> List[AlertRule]:
        with get_db_session() as db:
            rows = db.query(AlertRuleDB).filter(AlertRuleDB.scope == self.scope.value).all()
            return [_rule_to_pydantic(r) for r in rows]


class DbNotifierLister:
    def __init__(self, cluster_name: str):
        self.cluster_name = cluster_name

    def list(self) -> List[Notifier]:
        with get_db_session() as db:
            rows = db.query(NotifierDB).filter(NotifierDB.namespace == self.cluster_name).all()
            return [_notifier_to_pydantic(r) for r in rows]


class AlertingStorageService:
    def save_group(self, group: AlertGroup) -> None:
        scope = Scope(group.scope).value
        with get_db_session() as db:
            row = db.query(AlertGroupDB).filter(
                AlertGroupDB.scope == scope,
                AlertGroupDB.namespace == group.namespace,
                AlertGroupDB.name == group.name,
            ).first()
            if row is None:
                row = AlertGroupDB(scope=scope, namespace=group.namespace, name=group.name)
                db.add(row)
            row.display_name = group.display_name
            row.recipients = [r.model_dump(by_alias=True) for r in group.recipients]
            for f in _TIMING_FIELDS:
                setattr(row, f, getattr(group, f))

    def save_rule(self, rule: AlertRule) -> None:
        scope = Scope(rule.scope).value
        with get_db_session() as db:
            row = db.query(AlertRuleDB).filter(
                AlertRuleDB.scope == scope,
                AlertRuleDB.namespace == rule.namespace,
                AlertRuleDB.name == rule.name,
            ).first()
            if row is None:
                row = AlertRuleDB(scope=scope, namespace=rule.namespace, name=rule.name)
                db.add(row)
            row.group_name = rule.group_name
            row.project_name = rule.project_name
            row.display_name = rule.display_name
            row.severity = RuleSeverity(rule.severity).value
            row.state = AlertState(rule.state).value
            row.payload = rule.payload.model_dump(mode="json", by_alias=True)
            for f in _TIMING_FIELDS:
                setattr(row, f, getattr(rule, f))

    def save_notifier(self, notifier: Notifier) -> None:
        channel_type: Optional[str] = notifier.channel_type.value if notifier.channel_type else None
        channel_config: Dict[str, Any] = {}
        if channel_type:
            channel_config = getattr(notifier, f"{channel_type}_config").model_dump(by_alias=True)
            if encryption_enabled():
                channel_config = encrypt_config(channel_config)
        with get_db_session() as db:
            row = db.query(NotifierDB).filter(
                NotifierDB.namespace == notifier.namespace,
                NotifierDB.name == notifier.name,
            ).first()
            if row is None:
                row = NotifierDB(namespace=notifier.namespace, name=notifier.name)
                db.add(row)
            row.display_name = notifier.display_name
            row.channel_type = channel_type
            row.config = channel_config

    def delete_group(self, scope: Scope, namespace: str, name: str) -> bool:
        with get_db_session() as db:
            deleted = db.query(AlertGroupDB).filter(
                AlertGroupDB.scope == Scope(scope).value,
                AlertGroupDB.namespace == namespace,
                AlertGroupDB.name == name,
            ).delete()
            return bool(deleted)
