"""
Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import unittest

try:
    from ._env import ensure_test_env
except ImportError:
    from tests._env import ensure_test_env

ensure_test_env()

from models.alerting.rules import MetricRule, RuleSeverity
from services.alerting.metric_rules import format_threshold, get_expr, metric_to_rule


class MetricRuleTests(unittest.TestCase):
    def test_expression_appends_operator_and_threshold(self):
        self.assertEqual(get_expr("up", "equal", 0), "up==0")
        self.assertEqual(get_expr("load", "greater-or-equal", 1.5), "load>=1.5")
        self.assertEqual(get_expr("x", "not-equal", 3), "x!=3")

    def test_has_value_leaves_expression_untouched(self):
        self.assertEqual(get_expr("up", "has-value", 7), "up")

    def test_threshold_prints_integers_without_fraction(self):
        self.assertEqual(format_threshold(80.0), "80")
        self.assertEqual(format_threshold(0.25), "0.25")

    def test_metric_to_rule_labels(self):
        metric = MetricRule(expression="node_load1", comparison="greater-than", threshold_value=4, duration="5m")
        rule = metric_to_rule("c1:g1", "c1:g1_r1", RuleSeverity.WARNING, "High load", "c1", metric)

        self.assertEqual(rule.alert, "c1:g1_r1")
        self.assertEqual(rule.expr, "node_load1>4")
        self.assertEqual(rule.for_, "5m")
        self.assertEqual(rule.labels, {
            "alert_name": "High load",
            "alert_type": "metric",
            "cluster_name": "c1",
            "comparison": "greater-than",
            "duration": "5m",
            "expression": "node_load1",
            "group_id": "c1:g1",
            "rule_id": "c1:g1_r1",
            "severity": "warning",
            "threshold_value": "4",
        })
        self.assertEqual(list(rule.labels), sorted(rule.labels))

    def test_project_rules_carry_project_label(self):
        metric = MetricRule(expression="up", comparison="equal", threshold_value=0)
        rule = metric_to_rule("p1:g1", "p1:g1_r1", "critical", "Down", "c1", metric, project_name="p1")
        self.assertEqual(rule.labels["project_name"], "p1")


if __name__ == "__main__":
    unittest.main()
