"""
Interfaces to the collaborators the config syncer reads from and publishes to, with in-memory implementations. Listers return declarative objects, the status check reports whether Alertmanager is deployed and reachable, the secret store holds the published Alertmanager configuration, and the Prometheus rule store assembles and publishes rule-group containers. The database and HTTP backed implementations live in services.storage and services.alerting.mimir_rules.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import copy
import logging
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from models.alerting.groups import AlertGroup
from models.alerting.notifiers import Notifier
from models.alerting.prometheus_rules import PrometheusRule, Rule, RuleGroup
from models.alerting.rules import AlertRule
from services.alerting.errors import NotFoundError, NotReadyError

logger = logging.getLogger(__name__)


class AlertGroupLister(Protocol):
    def get(self, namespace: str, name: str) -> AlertGroup: ...


class AlertRuleLister(Protocol):
    def list(self) -> List[AlertRule]: ...


class NotifierLister(Protocol):
    def list(self) -> List[Notifier]: ...


class AlertmanagerStatus(Protocol):
    @property
    def is_deployed(self) -> bool: ...
    def get_endpoint(self) -> str: ...


class SecretStore(Protocol):
    def get(self, namespace: str, name: str) -> Optional[Dict[str, bytes]]: ...
    def update(self, namespace: str, name: str, data: Dict[str, bytes]) -> None: ...


class PrometheusRuleStore:
    """Builds rule-group containers in memory; subclasses decide how `sync_prometheus_rule` publishes them."""

    def __init__(self, labels: Optional[Dict[str, str]] = None):
        self.labels = labels or {"source": "alert-config-syncer"}

    def get_default_prometheus_rule(self, namespace: str, name: str) -> PrometheusRule:
        return PrometheusRule(name=name, namespace=namespace, labels=dict(self.labels))

    def get_rule_group(self, group_id: str) -> RuleGroup:
        return RuleGroup(name=group_id)

    def add_rule(self, rule_group: RuleGroup, rule: Rule) -> None:
        rule_group.rules.append(rule)

    def add_rule_group(self, prometheus_rule: PrometheusRule, rule_group: RuleGroup) -> None:
        prometheus_rule.groups.append(rule_group)

    def sync_prometheus_rule(self, prometheus_rule: PrometheusRule) -> None:
        raise NotImplementedError


class InMemoryAlertGroupLister:
    def __init__(self, groups: Iterable[AlertGroup] = ()):
        self._groups: Dict[Tuple[str, str], AlertGroup] = {(g.namespace, g.name): g for g in groups}

    def get(self, namespace: str, name: str) -> AlertGroup:
        group = self._groups.get((namespace, name))
        if group is None:
            raise NotFoundError(f"alert group {namespace}:{name} not found")
        return group


class InMemoryAlertRuleLister:
    def __init__(self, rules: Iterable[AlertRule] = ()):
        self._rules = list(rules)

    def list(self) -> List[AlertRule]:
        return list(self._rules)


class InMemoryNotifierLister:
    def __init__(self, notifiers: Iterable[Notifier] = ()):
        self._notifiers = list(notifiers)

    def list(self) -> List[Notifier]:
        return list(self._notifiers)


class StaticAlertmanagerStatus:
    def __init__(self, endpoint: Optional[str] = "http://alertmanager:9093", deployed: bool = True):
        self._endpoint = endpoint
        self._deployed = deployed

    @property
    def is_deployed(self) -> bool:
        return self._deployed

    def get_endpoint(self) -> str:
        if not self._endpoint:
            raise NotReadyError("alertmanager endpoint is not resolvable yet")
        return self._endpoint


class InMemorySecretStore:
    def __init__(self, secrets: Optional[Dict[Tuple[str, str], Dict[str, bytes]]] = None):
        self.secrets: Dict[Tuple[str, str], Dict[str, bytes]] = dict(secrets or {})
        self.update_calls = 0

    def get(self, namespace: str, name: str) -> Optional[Dict[str, bytes]]:
        data = self.secrets.get((namespace, name))
        return dict(data) if data is not None else None

    def update(self, namespace: str, name: str, data: Dict[str, bytes]) -> None:
        self.update_calls += 1
        self.secrets[(namespace, name)] = dict(data)


class InMemoryPrometheusRuleStore(PrometheusRuleStore):
    def __init__(self, labels: Optional[Dict[str, str]] = None):
        super().__init__(labels)
        self.rules: Dict[str, PrometheusRule] = {}
        self.created: List[str] = []
        self.updated: List[str] = []

    def sync_prometheus_rule(self, prometheus_rule: PrometheusRule) -> None:
        existing = self.rules.get(prometheus_rule.key)
        if existing is None:
            self.rules[prometheus_rule.key] = copy.deepcopy(prometheus_rule)
            self.created.append(prometheus_rule.key)
            logger.info("Created prometheus rule %s", prometheus_rule.key)
            return
        if existing.groups == prometheus_rule.groups:
            logger.debug("Prometheus rule %s unchanged", prometheus_rule.key)
            return
        self.rules[prometheus_rule.key] = copy.deepcopy(prometheus_rule)
        self.updated.append(prometheus_rule.key)
        logger.info("Updated prometheus rule %s", prometheus_rule.key)
