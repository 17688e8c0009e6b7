"""
Publishing of metric alert rules as Prometheus rule groups. The cluster gets one rule container in the cluster monitoring namespace and every project gets its own container in the project's monitoring namespace; each alert group becomes one rule group inside the container. Publication only depends on rules being active and metric based, never on whether the owning group has a reachable recipient.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from models.alerting.prometheus_rules import PrometheusRule
from models.alerting.rules import AlertRule
from services.alerting.identifiers import (
    cluster_monitoring_namespace,
    get_rule_id,
    parse_ref,
    project_monitoring_namespace,
)
from services.alerting.metric_rules import metric_to_rule
from services.alerting.rule_kinds import is_metric_rule
from services.alerting.stores import PrometheusRuleStore

logger = logging.getLogger(__name__)


class MetricRulePublisher:
    def __init__(self, cluster_name: str, rule_store: PrometheusRuleStore):
        self.cluster_name = cluster_name
        self.rule_store = rule_store
        # containers published by this process, keyed by container key
        self._published: Dict[str, Tuple[str, str]] = {}

    def _fill(
        self,
        prometheus_rule: PrometheusRule,
        groups: Dict[str, List[AlertRule]],
        group_ids: Iterable[str],
        project_name: Optional[str] = None,
    ) -> bool:
        attached = False
        for group_id in group_ids:
            rule_group = self.rule_store.get_rule_group(group_id)
            for alert_rule in groups.get(group_id, []):
                if not alert_rule.is_active or not is_metric_rule(alert_rule):
                    continue
                rule = metric_to_rule(
                    group_id,
                    get_rule_id(group_id, alert_rule.name),
                    alert_rule.severity,
                    alert_rule.display_name or alert_rule.name,
                    self.cluster_name,
                    alert_rule.payload,
                    project_name=project_name,
                )
                self.rule_store.add_rule(rule_group, rule)
            if rule_group.rules:
                self.rule_store.add_rule_group(prometheus_rule, rule_group)
                attached = True
        return attached

    def _sync(self, prometheus_rule: PrometheusRule) -> None:
        self.rule_store.sync_prometheus_rule(prometheus_rule)
        self._published[prometheus_rule.key] = (prometheus_rule.namespace, prometheus_rule.name)

    def _clear(self, prometheus_rule: PrometheusRule) -> None:
        """Sync an emptied container once so the store drops the groups it still evaluates."""
        if self._published.pop(prometheus_rule.key, None) is None:
            return
        self.rule_store.sync_prometheus_rule(prometheus_rule)
        logger.info("Cleared rule groups of %s, no metric rules left", prometheus_rule.key)

    def add_cluster_rules(self, groups: Dict[str, List[AlertRule]], keys: List[str]) -> bool:
        """Publish the cluster rule container; returns False when no group produced a rule."""
        prometheus_rule = self.rule_store.get_default_prometheus_rule(
            cluster_monitoring_namespace(), self.cluster_name
        )
        if not self._fill(prometheus_rule, groups, keys):
            logger.debug("No metric rules for cluster %s, skipping rule publish", self.cluster_name)
            self._clear(prometheus_rule)
            return False
        self._sync(prometheus_rule)
        return True

    def add_project_rules(self, projects: Dict[str, Dict[str, List[AlertRule]]], keys: List[str]) -> List[str]:
        """Publish one rule container per project and return the projects that were published."""
        published = []
        seen = set()
        for project_id in keys:
            groups = projects.get(project_id, {})
            _, project_name = parse_ref(project_id)
            prometheus_rule = self.rule_store.get_default_prometheus_rule(
                project_monitoring_namespace(project_name), project_name
            )
            seen.add(prometheus_rule.key)
            if not self._fill(prometheus_rule, groups, sorted(groups), project_name=project_name):
                logger.debug("No metric rules for project %s, skipping rule publish", project_name)
                self._clear(prometheus_rule)
                continue
            self._sync(prometheus_rule)
            published.append(project_name)

        cluster_key = self.rule_store.get_default_prometheus_rule(cluster_monitoring_namespace(), self.cluster_name).key
        for key in sorted(set(self._published) - seen - {cluster_key}):
            namespace, name = self._published[key]
            self._clear(self.rule_store.get_default_prometheus_rule(namespace, name))
        return published
