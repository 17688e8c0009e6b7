"""
Prometheus rule store backed by the Mimir ruler API. Each rule container maps to one ruler namespace named `<namespace>/<name>`; publishing uploads the rule groups whose content changed and deletes groups the container no longer holds, so an unchanged container costs a single listing request.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
import yaml

from config import config
from models.alerting.prometheus_rules import PrometheusRule
from services.alerting.config_yaml import dump_rule_group, load_rule_groups, prune_empty
from services.alerting.errors import PublishError
from services.alerting.stores import PrometheusRuleStore
from services.common.http_client import create_client, request_with_retry

logger = logging.getLogger(__name__)


class MimirRuleStore(PrometheusRuleStore):
    def __init__(
        self,
        base_url: Optional[str] = None,
        org_id: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        labels: Optional[Dict[str, str]] = None,
    ):
        super().__init__(labels)
        self.base_url = (base_url or config.MIMIR_URL).rstrip("/")
        self.org_id = org_id or config.MIMIR_ORG_ID
        self._client = client or create_client(config.DEFAULT_TIMEOUT)

    def _namespace_url(self, prometheus_rule: PrometheusRule) -> str:
        namespace = quote(prometheus_rule.key, safe="")
        return f"{self.base_url}{config.MIMIR_RULER_CONFIG_BASEPATH}/{namespace}"

    def _existing_groups(self, namespace_url: str, ruler_namespace: str) -> Dict[str, Any]:
        response = request_with_retry(self._client, "GET", namespace_url, headers={"X-Scope-OrgID": self.org_id})
        if response.status_code == 404:
            return {}
        if response.status_code != 200:
            raise PublishError(f"Unexpected Mimir list response: {response.status_code}")
        try:
            listing = load_rule_groups(response.text)
        except (yaml.YAMLError, ValueError) as exc:
            raise PublishError(f"Malformed Mimir rule listing for {ruler_namespace}") from exc
        return {g.get("name"): g for g in listing.get(ruler_namespace) or [] if isinstance(g, dict)}

    def sync_prometheus_rule(self, prometheus_rule: PrometheusRule) -> None:
        namespace_url = self._namespace_url(prometheus_rule)
        org_header = {"X-Scope-OrgID": self.org_id}
        try:
            existing = self._existing_groups(namespace_url, prometheus_rule.key)
            desired = {g.name: g for g in prometheus_rule.groups}

            for group_name in sorted(set(existing) - set(desired)):
                delete_url = f"{namespace_url}/{quote(group_name, safe='')}"
                response = request_with_retry(self._client, "DELETE", delete_url, headers=org_header)
                if response.status_code not in {200, 202, 204, 404}:
                    raise PublishError(f"Unexpected Mimir delete response: {response.status_code}")
                logger.info("Deleted stale rule group %s from %s", group_name, prometheus_rule.key)

            for group_name, rule_group in desired.items():
                if existing.get(group_name) == prune_empty(rule_group.model_dump(mode="json", by_alias=True)):
                    continue
                response = request_with_retry(
                    self._client,
                    "POST",
                    namespace_url,
                    content=dump_rule_group(rule_group),
                    headers={**org_header, "Content-Type": "application/yaml"},
                )
                if response.status_code not in {200, 201, 202, 204}:
                    raise PublishError(f"Unexpected Mimir upsert response: {response.status_code}")
                logger.info("Published rule group %s to %s", group_name, prometheus_rule.key)
        except httpx.HTTPError as exc:
            raise PublishError(f"Sync prometheus rule {prometheus_rule.key}: {exc}") from exc
