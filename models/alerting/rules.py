"""
Module defines Pydantic models for cluster and project alert rules. Every rule carries exactly one payload, modelled as a union discriminated on its `kind`, so consumers dispatch on the payload kind instead of probing optional fields.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Annotated, Dict, Literal, Optional, Union
from pydantic import BaseModel, Field, model_validator
from enum import Enum

from .groups import Scope, TimingFields

DESC_RULE_NAMESPACE = "Cluster name for cluster rules, project name for project rules"
DESC_RULE_NAME = "Rule name"
DESC_RULE_GROUP_NAME = "Owning alert group in the form <namespace>:<group>"
DESC_RULE_PROJECT_NAME = "Owning project in the form <cluster>:<project>"
DESC_RULE_DISPLAY_NAME = "Human readable rule name"
DESC_RULE_SEVERITY = "Severity level of the alert rule"
DESC_RULE_STATE = "Activation state of the rule"
DESC_RULE_PAYLOAD = "Condition evaluated by this rule"
DESC_METRIC_EXPRESSION = "PromQL expression"
DESC_METRIC_COMPARISON = "Comparison applied between the expression and the threshold"
DESC_METRIC_THRESHOLD = "Threshold value"
DESC_METRIC_DURATION = "Duration the condition must hold before firing"


class RuleKind(str, Enum):
    METRIC = "metric"
    EVENT = "event"
    NODE = "node"
    SYSTEM_SERVICE = "system-service"
    POD = "pod"
    WORKLOAD = "workload"


class RuleSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertState(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MUTED = "muted"


class Comparison(str, Enum):
    EQUAL = "equal"
    NOT_EQUAL = "not-equal"
    GREATER_THAN = "greater-than"
    LESS_THAN = "less-than"
    GREATER_OR_EQUAL = "greater-or-equal"
    LESS_OR_EQUAL = "less-or-equal"
    HAS_VALUE = "has-value"


class MetricRule(BaseModel):
    kind: Literal["metric"] = "metric"
    expression: str = Field(..., min_length=1, description=DESC_METRIC_EXPRESSION)
    comparison: Comparison = Field(Comparison.GREATER_THAN, description=DESC_METRIC_COMPARISON)
    threshold_value: float = Field(0, alias="thresholdValue", description=DESC_METRIC_THRESHOLD)
    duration: str = Field("1m", description=DESC_METRIC_DURATION)

    class Config:
        use_enum_values = True
        populate_by_name = True


class EventRule(BaseModel):
    kind: Literal["event"] = "event"
    event_type: str = Field("Warning", alias="eventType")
    resource_kind: str = Field(..., alias="resourceKind")

    class Config:
        populate_by_name = True


class NodeRule(BaseModel):
    kind: Literal["node"] = "node"
    node_name: Optional[str] = Field(None, alias="nodeName")
    selector: Dict[str, str] = Field(default_factory=dict)
    condition: str = Field("notready")
    mem_threshold: int = Field(70, alias="memThreshold")
    cpu_threshold: int = Field(70, alias="cpuThreshold")

    class Config:
        populate_by_name = True


class SystemServiceRule(BaseModel):
    kind: Literal["system-service"] = "system-service"
    condition: str = Field(..., description="System component to watch, e.g. etcd or scheduler")


class PodRule(BaseModel):
    kind: Literal["pod"] = "pod"
    pod_name: str = Field(..., alias="podName")
    condition: str = Field("notrunning")
    restart_times: int = Field(3, alias="restartTimes")
    restart_interval_seconds: int = Field(300, alias="restartIntervalSeconds")

    class Config:
        populate_by_name = True


class WorkloadRule(BaseModel):
    kind: Literal["workload"] = "workload"
    workload_id: Optional[str] = Field(None, alias="workloadId")
    selector: Dict[str, str] = Field(default_factory=dict)
    available_percentage: int = Field(70, alias="availablePercentage", ge=0, le=100)

    class Config:
        populate_by_name = True


RulePayload = Annotated[
    Union[MetricRule, EventRule, NodeRule, SystemServiceRule, PodRule, WorkloadRule],
    Field(discriminator="kind"),
]


class AlertRule(TimingFields):
    namespace: str = Field(..., description=DESC_RULE_NAMESPACE)
    name: str = Field(..., description=DESC_RULE_NAME)
    scope: Scope = Field(Scope.CLUSTER)
    group_name: str = Field(..., alias="groupName", description=DESC_RULE_GROUP_NAME)
    project_name: Optional[str] = Field(None, alias="projectName", description=DESC_RULE_PROJECT_NAME)
    display_name: Optional[str] = Field(None, alias="displayName", description=DESC_RULE_DISPLAY_NAME)
    severity: RuleSeverity = Field(RuleSeverity.CRITICAL, description=DESC_RULE_SEVERITY)
    state: AlertState = Field(AlertState.ACTIVE, description=DESC_RULE_STATE)
    payload: RulePayload = Field(..., description=DESC_RULE_PAYLOAD)

    @model_validator(mode="after")
    def _project_rules_name_their_project(self) -> "AlertRule":
        if self.scope == Scope.PROJECT and not self.project_name:
            raise ValueError("project scoped rules require projectName")
        return self

    @property
    def kind(self) -> RuleKind:
        return RuleKind(self.payload.kind)

    @property
    def is_active(self) -> bool:
        return self.state != AlertState.INACTIVE
