"""
Conversion of metric alert rules into Prometheus alerting rules.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Optional

from models.alerting.prometheus_rules import Rule
from models.alerting.rules import Comparison, MetricRule

COMPARISON_OPERATORS = {
    Comparison.EQUAL.value: "==",
    Comparison.NOT_EQUAL.value: "!=",
    Comparison.GREATER_THAN.value: ">",
    Comparison.LESS_THAN.value: "<",
    Comparison.GREATER_OR_EQUAL.value: ">=",
    Comparison.LESS_OR_EQUAL.value: "<=",
}


def _enum_value(value) -> str:
    return str(getattr(value, "value", value))


def format_threshold(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def get_expr(expression: str, comparison: str, threshold_value: float) -> str:
    if comparison == Comparison.HAS_VALUE.value:
        return expression
    return f"{expression}{COMPARISON_OPERATORS[comparison]}{format_threshold(threshold_value)}"


def metric_to_rule(
    group_id: str,
    rule_id: str,
    severity: str,
    display_name: str,
    cluster_name: str,
    metric: MetricRule,
    project_name: Optional[str] = None,
) -> Rule:
    comparison = _enum_value(metric.comparison)
    labels = {
        "alert_type": "metric",
        "alert_name": display_name,
        "group_id": group_id,
        "cluster_name": cluster_name,
        "rule_id": rule_id,
        "severity": _enum_value(severity),
        "duration": metric.duration,
        "expression": metric.expression,
        "comparison": comparison,
        "threshold_value": format_threshold(metric.threshold_value),
    }
    if project_name:
        labels["project_name"] = project_name

    return Rule(
        alert=rule_id,
        expr=get_expr(metric.expression, comparison, metric.threshold_value),
        for_=metric.duration,
        labels=dict(sorted(labels.items())),
    )
