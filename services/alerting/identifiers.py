"""
Identifier helpers shared by the config syncer: parsing `namespace:name` references, deriving rule and notifier ids, and naming the namespaces and secrets generated artifacts are published to.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Tuple

from config import config

CONFIG_SECRET_KEY = "alertmanager.yaml"
TEMPLATE_SECRET_KEY = "notification.tmpl"


def parse_ref(ref: str) -> Tuple[str, str]:
    namespace, sep, name = (ref or "").partition(":")
    if not sep:
        return "", namespace
    return namespace, name


def get_rule_id(group_id: str, rule_name: str) -> str:
    return f"{group_id}_{rule_name}"


def get_notifier_id(cluster_name: str, notifier_name: str) -> str:
    return f"{cluster_name}:{notifier_name}"


def cluster_monitoring_namespace() -> str:
    return config.CLUSTER_MONITORING_NAMESPACE


def project_monitoring_namespace(project_name: str) -> str:
    return f"{config.PROJECT_MONITORING_NAMESPACE_PREFIX}-{project_name}"


def alertmanager_secret_location() -> Tuple[str, str]:
    return config.ALERTMANAGER_APP_NAMESPACE, f"alertmanager-{config.ALERTMANAGER_APP_NAME}"


def group_ref(namespace: str, ref: str) -> str:
    """Qualify a group reference with the namespace its group is looked up in."""
    _, name = parse_ref(ref)
    return f"{namespace}:{name}"


def rule_in_cluster(cluster_name: str, project_ref: str) -> bool:
    namespace, _ = parse_ref(project_ref)
    return namespace == cluster_name
