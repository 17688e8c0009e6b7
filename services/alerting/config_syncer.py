"""
Reconciliation entry point for alerting configuration. Every call recomputes the complete Alertmanager document and the Prometheus rule containers from the current alert groups, alert rules and notifiers, then writes the document to the Alertmanager secret only when its serialized bytes differ from what is already stored. Nothing is cached between calls, so concurrent or repeated reconciles converge on the same output.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from collections import defaultdict
from enum import Enum
from operator import attrgetter
from typing import Dict, List, Optional, Tuple

from models.alerting.rules import AlertRule
from services.alerting.config_assembler import ConfigAssembler
from services.alerting.config_yaml import dump_config
from services.alerting.errors import BackingStoreError, NotReadyError, PublishError
from services.alerting.identifiers import (
    CONFIG_SECRET_KEY,
    TEMPLATE_SECRET_KEY,
    alertmanager_secret_location,
    group_ref,
    parse_ref,
    rule_in_cluster,
)
from services.alerting.rule_publisher import MetricRulePublisher
from services.alerting.stores import (
    AlertGroupLister,
    AlertmanagerStatus,
    AlertRuleLister,
    NotifierLister,
    PrometheusRuleStore,
    SecretStore,
)
from services.alerting.templates import NOTIFICATION_TMPL, get_sync_config

logger = logging.getLogger(__name__)

ClusterGroups = Dict[str, List[AlertRule]]
ProjectGroups = Dict[str, Dict[str, List[AlertRule]]]


class SyncOutcome(str, Enum):
    NOT_DEPLOYED = "not_deployed"
    NOT_READY = "not_ready"
    UNCHANGED = "unchanged"
    PUBLISHED = "published"


def partition_rules(
    cluster_name: str,
    cluster_rules: List[AlertRule],
    project_rules: List[AlertRule],
) -> Tuple[ClusterGroups, ProjectGroups]:
    """Bucket active rules by qualified group id, and project rules by project first; rules of other clusters' projects are dropped."""
    cluster_groups: ClusterGroups = defaultdict(list)
    for rule in cluster_rules:
        if not rule.is_active:
            continue
        cluster_groups[group_ref(cluster_name, rule.group_name)].append(rule)

    project_groups: ProjectGroups = defaultdict(lambda: defaultdict(list))
    for rule in project_rules:
        if not rule.is_active:
            continue
        if not rule_in_cluster(cluster_name, rule.project_name or ""):
            continue
        _, project_name = parse_ref(rule.project_name or "")
        project_groups[project_name][group_ref(project_name, rule.group_name)].append(rule)

    by_name = attrgetter("name")
    return (
        {g: sorted(rules, key=by_name) for g, rules in cluster_groups.items()},
        {p: {g: sorted(rules, key=by_name) for g, rules in groups.items()} for p, groups in project_groups.items()},
    )


class ConfigSyncer:
    def __init__(
        self,
        cluster_name: str,
        alertmanager_status: AlertmanagerStatus,
        notifier_lister: NotifierLister,
        cluster_rule_lister: AlertRuleLister,
        project_rule_lister: AlertRuleLister,
        cluster_group_lister: AlertGroupLister,
        project_group_lister: AlertGroupLister,
        rule_store: PrometheusRuleStore,
        secret_store: SecretStore,
    ):
        self.cluster_name = cluster_name
        self.alertmanager_status = alertmanager_status
        self.notifier_lister = notifier_lister
        self.cluster_rule_lister = cluster_rule_lister
        self.project_rule_lister = project_rule_lister
        self.secret_store = secret_store
        self.publisher = MetricRulePublisher(cluster_name, rule_store)
        self.assembler = ConfigAssembler(cluster_name, cluster_group_lister, project_group_lister)

    def _list(self, lister, action: str) -> list:
        try:
            return lister.list()
        except Exception as exc:
            raise BackingStoreError(f"{action}: {exc}") from exc

    def reconcile(self) -> SyncOutcome:
        if not self.alertmanager_status.is_deployed:
            logger.debug("Alertmanager is not deployed, skipping alert config sync")
            return SyncOutcome.NOT_DEPLOYED
        try:
            self.alertmanager_status.get_endpoint()
        except NotReadyError as exc:
            logger.warning("Alertmanager is not ready, deferring alert config sync: %s", exc)
            return SyncOutcome.NOT_READY

        notifiers = self._list(self.notifier_lister, "List notifiers")
        cluster_rules = self._list(self.cluster_rule_lister, "List cluster alert rules")
        project_rules = self._list(self.project_rule_lister, "List project alert rules")

        cluster_groups, project_groups = partition_rules(self.cluster_name, cluster_rules, project_rules)
        cluster_keys = sorted(cluster_groups)
        project_keys = sorted(project_groups)

        self.publisher.add_cluster_rules(cluster_groups, cluster_keys)
        self.publisher.add_project_rules(project_groups, project_keys)

        alertmanager_config = get_sync_config()
        self.assembler.add_cluster_alerts(alertmanager_config, cluster_groups, cluster_keys, notifiers)
        self.assembler.add_project_alerts(alertmanager_config, project_groups, project_keys, notifiers)

        data = dump_config(alertmanager_config)
        return self._publish(data)

    def _publish(self, data: bytes) -> SyncOutcome:
        namespace, name = alertmanager_secret_location()
        try:
            current: Optional[Dict[str, bytes]] = self.secret_store.get(namespace, name)
        except Exception as exc:
            raise PublishError(f"Get secrets: {exc}") from exc

        secret_data = dict(current or {})
        if secret_data.get(CONFIG_SECRET_KEY) == data:
            logger.debug("The config stay the same, will not update the secret")
            return SyncOutcome.UNCHANGED

        secret_data[CONFIG_SECRET_KEY] = data
        secret_data[TEMPLATE_SECRET_KEY] = NOTIFICATION_TMPL.encode("utf-8")
        try:
            self.secret_store.update(namespace, name, secret_data)
        except Exception as exc:
            raise PublishError(f"Update secrets: {exc}") from exc
        logger.info("Published alertmanager config to secret %s/%s", namespace, name)
        return SyncOutcome.PUBLISHED