"""
Assembly of the Alertmanager routing tree and receivers from partitioned alert rules. Cluster groups are processed first, then project groups, each in sorted key order, and every group that resolves at least one recipient contributes one receiver and one group route with a child route per routable rule. Groups without a reachable recipient contribute nothing to the document.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Dict, List, Optional

from models.alerting.groups import AlertGroup, Scope
from models.alerting.notifiers import Notifier
from models.alerting.receivers import AlertmanagerConfig, Receiver
from models.alerting.rules import AlertRule
from services.alerting.errors import BackingStoreError, NotFoundError
from services.alerting.identifiers import parse_ref
from services.alerting.recipients import add_recipients
from services.alerting.routes import Timing, append_route, new_group_route
from services.alerting.rule_kinds import add_rule_route
from services.alerting.stores import AlertGroupLister

logger = logging.getLogger(__name__)


class ConfigAssembler:
    def __init__(
        self,
        cluster_name: str,
        cluster_group_lister: AlertGroupLister,
        project_group_lister: AlertGroupLister,
    ):
        self.cluster_name = cluster_name
        self.cluster_group_lister = cluster_group_lister
        self.project_group_lister = project_group_lister

    def _get_group(self, lister: AlertGroupLister, scope: Scope, namespace: str, group_name: str) -> Optional[AlertGroup]:
        try:
            return lister.get(namespace, group_name)
        except NotFoundError:
            logger.debug("Alert group %s:%s no longer exists, skipping its rules", namespace, group_name)
            return None
        except Exception as exc:
            raise BackingStoreError(
                f"get {scope.value} alert group {namespace}:{group_name} failed, {exc}"
            ) from exc

    def _add_group(
        self,
        alertmanager_config: AlertmanagerConfig,
        scope: Scope,
        group: AlertGroup,
        group_id: str,
        rules: List[AlertRule],
        notifiers: List[Notifier],
    ) -> None:
        receiver = Receiver(name=group_id)
        if not add_recipients(self.cluster_name, notifiers, receiver, group.recipients):
            logger.debug("Alert group %s has no resolvable recipient, skipping its routes", group_id)
            return

        alertmanager_config.receivers.append(receiver)
        group_timing = Timing.defaults().inherit(group)
        group_route = new_group_route(group_id, group_timing)
        for rule in rules:
            if not rule.is_active:
                continue
            add_rule_route(scope, group_route, group_timing, group_id, rule)
        append_route(alertmanager_config.route, group_route)

    def add_cluster_alerts(
        self,
        alertmanager_config: AlertmanagerConfig,
        groups: Dict[str, List[AlertRule]],
        keys: List[str],
        notifiers: List[Notifier],
    ) -> AlertmanagerConfig:
        for group_id in keys:
            _, group_name = parse_ref(group_id)
            group = self._get_group(self.cluster_group_lister, Scope.CLUSTER, self.cluster_name, group_name)
            if group is None:
                continue
            self._add_group(alertmanager_config, Scope.CLUSTER, group, group_id, groups[group_id], notifiers)
        return alertmanager_config

    def add_project_alerts(
        self,
        alertmanager_config: AlertmanagerConfig,
        projects: Dict[str, Dict[str, List[AlertRule]]],
        keys: List[str],
        notifiers: List[Notifier],
    ) -> AlertmanagerConfig:
        for project_name in keys:
            groups = projects[project_name]
            for group_id in sorted(groups):
                _, group_name = parse_ref(group_id)
                group = self._get_group(self.project_group_lister, Scope.PROJECT, project_name, group_name)
                if group is None:
                    continue
                self._add_group(alertmanager_config, Scope.PROJECT, group, group_id, groups[group_id], notifiers)
        return alertmanager_config
