"""
Module defines Pydantic models for Prometheus rule-group artifacts, shaped like the prometheus-operator PrometheusRule resource: one container per scope holding one rule group per alert group.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

DESC_RULE_ALERT = "Alert name, the rule id"
DESC_RULE_EXPR = "PromQL expression evaluated by Prometheus"
DESC_RULE_FOR = "Duration the expression must hold before the alert fires"
DESC_RULE_GROUP_NAME = "Rule group name, the alert group id"
DESC_PROMETHEUS_RULE_NAME = "Container name, the cluster or project name"
DESC_PROMETHEUS_RULE_NAMESPACE = "Namespace of the monitoring stack consuming the container"


class Rule(BaseModel):
    alert: str = Field(..., description=DESC_RULE_ALERT)
    expr: str = Field(..., description=DESC_RULE_EXPR)
    for_: Optional[str] = Field(None, alias="for", description=DESC_RULE_FOR)
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)
    model_config = ConfigDict(populate_by_name=True)


class RuleGroup(BaseModel):
    name: str = Field(..., description=DESC_RULE_GROUP_NAME)
    rules: List[Rule] = Field(default_factory=list)


class PrometheusRule(BaseModel):
    name: str = Field(..., description=DESC_PROMETHEUS_RULE_NAME)
    namespace: str = Field(..., description=DESC_PROMETHEUS_RULE_NAMESPACE)
    labels: Dict[str, str] = Field(default_factory=dict)
    groups: List[RuleGroup] = Field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.name}"
