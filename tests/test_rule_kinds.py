"""
Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

try:
    from ._env import ensure_test_env
except ImportError:
    from tests._env import ensure_test_env

ensure_test_env()

from models.alerting.groups import Scope
from models.alerting.rules import AlertRule, RuleKind
from services.alerting.routes import Timing, new_group_route
from services.alerting.rule_kinds import add_rule_route, classify, is_metric_rule, route_handler

PAYLOADS = {
    RuleKind.METRIC: {"kind": "metric", "expression": "up"},
    RuleKind.EVENT: {"kind": "event", "resourceKind": "Pod"},
    RuleKind.NODE: {"kind": "node", "nodeName": "n1"},
    RuleKind.SYSTEM_SERVICE: {"kind": "system-service", "condition": "etcd"},
    RuleKind.POD: {"kind": "pod", "podName": "web-0"},
    RuleKind.WORKLOAD: {"kind": "workload", "workloadId": "deployment:web"},
}


def _rule(kind: RuleKind, scope: Scope = Scope.CLUSTER) -> AlertRule:
    extra = {"project_name": "c1:p1"} if scope == Scope.PROJECT else {}
    return AlertRule(namespace="c1", name=f"{kind.value}-rule", scope=scope, group_name="g1", payload=PAYLOADS[kind], **extra)


def test_classify_reads_payload_kind():
    for kind in RuleKind:
        assert classify(_rule(kind)) == kind
    assert is_metric_rule(_rule(RuleKind.METRIC))
    assert not is_metric_rule(_rule(RuleKind.NODE))


@pytest.mark.parametrize("kind,routed", [
    (RuleKind.EVENT, True),
    (RuleKind.METRIC, True),
    (RuleKind.NODE, True),
    (RuleKind.SYSTEM_SERVICE, True),
    (RuleKind.POD, False),
    (RuleKind.WORKLOAD, False),
])
def test_cluster_dispatch(kind, routed):
    assert (route_handler(Scope.CLUSTER, _rule(kind)) is not None) == routed


@pytest.mark.parametrize("kind,routed", [
    (RuleKind.EVENT, False),
    (RuleKind.METRIC, True),
    (RuleKind.NODE, False),
    (RuleKind.SYSTEM_SERVICE, False),
    (RuleKind.POD, True),
    (RuleKind.WORKLOAD, True),
])
def test_project_dispatch(kind, routed):
    assert (route_handler("project", _rule(kind, Scope.PROJECT)) is not None) == routed


def test_add_rule_route_attaches_event_and_rule_children():
    timing = Timing.defaults()
    group_route = new_group_route("g1", timing)

    assert add_rule_route(Scope.CLUSTER, group_route, timing, "g1", _rule(RuleKind.EVENT))
    assert add_rule_route(Scope.CLUSTER, group_route, timing, "g1", _rule(RuleKind.NODE))
    assert not add_rule_route(Scope.CLUSTER, group_route, timing, "g1", _rule(RuleKind.POD))

    event_route, node_route = group_route.routes
    assert event_route.match == {"alert_type": "event", "rule_id": "g1_event-rule"}
    assert event_route.group_interval == "1s"
    assert node_route.match == {"rule_id": "g1_node-rule"}
    assert node_route.group_interval is None
