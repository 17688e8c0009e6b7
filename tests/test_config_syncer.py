"""
Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest
import yaml

try:
    from ._env import ensure_test_env
except ImportError:
    from tests._env import ensure_test_env

ensure_test_env()

from models.alerting.groups import AlertGroup, Recipient
from models.alerting.notifiers import Notifier, SlackConfig, WebhookConfig
from models.alerting.rules import AlertRule
from services.alerting.config_syncer import ConfigSyncer, SyncOutcome, partition_rules
from services.alerting.errors import BackingStoreError, PublishError
from services.alerting.identifiers import CONFIG_SECRET_KEY, TEMPLATE_SECRET_KEY
from services.alerting.stores import (
    InMemoryAlertGroupLister,
    InMemoryAlertRuleLister,
    InMemoryNotifierLister,
    InMemoryPrometheusRuleStore,
    InMemorySecretStore,
    StaticAlertmanagerStatus,
)
from services.alerting.templates import NOTIFICATION_TMPL

SECRET = ("cattle-prometheus", "alertmanager-cluster-alerting")
SLACK = Notifier(namespace="c1", name="slack1", slack_config=SlackConfig(url="https://hooks.slack.test/x", default_recipient="#alerts"))
HOOK = Notifier(namespace="c1", name="hook1", webhook_config=WebhookConfig(url="http://hook"))


def metric_rule(name, group="g1", **kwargs):
    return AlertRule(
        namespace="c1",
        name=name,
        group_name=group,
        payload={"kind": "metric", "expression": "up", "comparison": "equal", "thresholdValue": 0},
        **kwargs,
    )


def event_rule(name, group="g1"):
    return AlertRule(namespace="c1", name=name, group_name=group, payload={"kind": "event", "resourceKind": "Pod"})


def project_rule(name, payload, project="c1:p1", group="p1:pg"):
    return AlertRule(namespace="p1", name=name, scope="project", group_name=group, project_name=project, payload=payload)


class FailingLister:
    def list(self):
        raise RuntimeError("backing store down")

    def get(self, namespace, name):
        raise RuntimeError("backing store down")


def build_syncer(
    cluster_rules=(),
    project_rules=(),
    cluster_groups=(),
    project_groups=(),
    notifiers=(SLACK, HOOK),
    status=None,
    secret_store=None,
    rule_store=None,
    **overrides,
):
    kwargs = dict(
        cluster_name="c1",
        alertmanager_status=status or StaticAlertmanagerStatus(),
        notifier_lister=InMemoryNotifierLister(notifiers),
        cluster_rule_lister=InMemoryAlertRuleLister(cluster_rules),
        project_rule_lister=InMemoryAlertRuleLister(project_rules),
        cluster_group_lister=InMemoryAlertGroupLister(cluster_groups),
        project_group_lister=InMemoryAlertGroupLister(project_groups),
        rule_store=rule_store if rule_store is not None else InMemoryPrometheusRuleStore(),
        secret_store=secret_store if secret_store is not None else InMemorySecretStore(),
    )
    kwargs.update(overrides)
    return ConfigSyncer(**kwargs)


def published_config(secret_store):
    return yaml.safe_load(secret_store.secrets[SECRET][CONFIG_SECRET_KEY])


def g1(recipient="c1:slack1", **timing):
    return AlertGroup(namespace="c1", name="g1", recipients=[Recipient(notifier_name=recipient)], **timing)


def test_slack_group_with_one_metric_rule():
    secrets = InMemorySecretStore()
    rules = InMemoryPrometheusRuleStore()
    syncer = build_syncer(cluster_rules=[metric_rule("r1")], cluster_groups=[g1()], secret_store=secrets, rule_store=rules)

    assert syncer.reconcile() == SyncOutcome.PUBLISHED

    doc = published_config(secrets)
    assert [r["name"] for r in doc["receivers"]] == ["default", "c1:g1"]
    slack_configs = doc["receivers"][1]["slack_configs"]
    assert len(slack_configs) == 1
    assert slack_configs[0]["channel"] == "#alerts"
    assert slack_configs[0]["api_url"] == "https://hooks.slack.test/x"

    group_route = doc["route"]["routes"][0]
    assert group_route["receiver"] == "c1:g1"
    assert group_route["match"] == {"group_id": "c1:g1"}
    assert "group_interval" not in group_route
    assert group_route["routes"] == [{"match": {"rule_id": "c1:g1_r1"}, "group_wait": "10s", "repeat_interval": "10s"}]

    container = rules.rules["cattle-prometheus/c1"]
    assert [g.name for g in container.groups] == ["c1:g1"]
    assert [r.alert for r in container.groups[0].rules] == ["c1:g1_r1"]

    assert secrets.secrets[SECRET][TEMPLATE_SECRET_KEY] == NOTIFICATION_TMPL.encode("utf-8")


def test_default_document_shape():
    secrets = InMemorySecretStore()
    build_syncer(secret_store=secrets).reconcile()

    doc = published_config(secrets)
    assert doc["global"] == {
        "resolve_timeout": "5m",
        "smtp_require_tls": False,
        "pagerduty_url": "https://events.pagerduty.com/generic/2010-04-15/create_event.json",
    }
    assert doc["route"] == {
        "receiver": "default",
        "group_by": ["group_id", "rule_id"],
        "group_wait": "1m",
        "group_interval": "10s",
        "repeat_interval": "1h",
    }
    assert doc["receivers"] == [{"name": "default"}]
    assert doc["templates"] == ["/etc/alertmanager/config/notification.tmpl"]


def test_unknown_notifier_drops_routing_but_keeps_rule_group():
    secrets = InMemorySecretStore()
    rules = InMemoryPrometheusRuleStore()
    syncer = build_syncer(
        cluster_rules=[metric_rule("r1")],
        cluster_groups=[g1(recipient="c1:nobody")],
        secret_store=secrets,
        rule_store=rules,
    )

    assert syncer.reconcile() == SyncOutcome.PUBLISHED

    doc = published_config(secrets)
    assert doc["receivers"] == [{"name": "default"}]
    assert "routes" not in doc["route"]
    assert [r.alert for r in rules.rules["cattle-prometheus/c1"].groups[0].rules] == ["c1:g1_r1"]


def test_second_reconcile_does_not_write():
    secrets = InMemorySecretStore()
    syncer = build_syncer(cluster_rules=[metric_rule("r1")], cluster_groups=[g1()], secret_store=secrets)

    assert syncer.reconcile() == SyncOutcome.PUBLISHED
    assert syncer.reconcile() == SyncOutcome.UNCHANGED
    assert secrets.update_calls == 1


def test_output_is_independent_of_listing_order():
    groups = [
        g1(),
        AlertGroup(namespace="c1", name="g2", recipients=[Recipient(notifier_name="c1:hook1")]),
    ]
    cluster_rules = [metric_rule("r2"), event_rule("e1"), metric_rule("r1", group="g2"), metric_rule("r3")]
    project_rules = [
        project_rule("pm1", {"kind": "metric", "expression": "up"}),
        project_rule("pod1", {"kind": "pod", "podName": "web-0"}),
    ]
    project_groups = [AlertGroup(namespace="p1", name="pg", scope="project", recipients=[Recipient(notifier_name="c1:hook1")])]

    first, second = InMemorySecretStore(), InMemorySecretStore()
    first_rules, second_rules = InMemoryPrometheusRuleStore(), InMemoryPrometheusRuleStore()
    build_syncer(cluster_rules, project_rules, groups, project_groups, secret_store=first, rule_store=first_rules).reconcile()
    build_syncer(
        list(reversed(cluster_rules)),
        list(reversed(project_rules)),
        list(reversed(groups)),
        project_groups,
        notifiers=(HOOK, SLACK),
        secret_store=second,
        rule_store=second_rules,
    ).reconcile()

    assert first.secrets[SECRET][CONFIG_SECRET_KEY] == second.secrets[SECRET][CONFIG_SECRET_KEY]
    assert first_rules.rules == second_rules.rules


def test_inactive_rules_are_excluded_everywhere():
    secrets = InMemorySecretStore()
    rules = InMemoryPrometheusRuleStore()
    build_syncer(
        cluster_rules=[metric_rule("r1"), metric_rule("r2", state="inactive"), event_rule("e1").model_copy(update={"state": "inactive"})],
        cluster_groups=[g1()],
        secret_store=secrets,
        rule_store=rules,
    ).reconcile()

    child_matches = [r["match"] for r in published_config(secrets)["route"]["routes"][0]["routes"]]
    assert child_matches == [{"rule_id": "c1:g1_r1"}]
    assert [r.alert for r in rules.rules["cattle-prometheus/c1"].groups[0].rules] == ["c1:g1_r1"]


def test_group_with_only_inactive_rules_produces_nothing():
    secrets = InMemorySecretStore()
    rules = InMemoryPrometheusRuleStore()
    build_syncer(
        cluster_rules=[metric_rule("r1", state="inactive")],
        cluster_groups=[g1()],
        secret_store=secrets,
        rule_store=rules,
    ).reconcile()

    assert published_config(secrets)["receivers"] == [{"name": "default"}]
    assert rules.rules == {}


def test_muted_rules_still_route():
    cluster, _ = partition_rules("c1", [metric_rule("r1", state="muted")], [])
    assert [r.name for r in cluster["c1:g1"]] == ["r1"]


def test_bare_and_qualified_group_refs_share_one_group():
    cluster, projects = partition_rules(
        "c1",
        [metric_rule("r2", group="c1:g1"), metric_rule("r1")],
        [project_rule("pod1", {"kind": "pod", "podName": "web-0"}, group="pg")],
    )
    assert list(cluster) == ["c1:g1"]
    assert [r.name for r in cluster["c1:g1"]] == ["r1", "r2"]
    assert list(projects["p1"]) == ["p1:pg"]


def test_group_named_default_does_not_clash_with_root_receiver():
    secrets = InMemorySecretStore()
    syncer = build_syncer(
        cluster_rules=[AlertRule(namespace="c1", name="n1", group_name="default", payload={"kind": "node", "nodeName": "node-1"})],
        cluster_groups=[AlertGroup(namespace="c1", name="default", recipients=[Recipient(notifier_name="c1:hook1")])],
        secret_store=secrets,
    )

    assert syncer.reconcile() == SyncOutcome.PUBLISHED
    names = [r["name"] for r in published_config(secrets)["receivers"]]
    assert names == ["default", "c1:default"]


def test_rule_timing_inherits_group_or_uses_overrides():
    secrets = InMemorySecretStore()
    build_syncer(
        cluster_rules=[
            metric_rule("inherits"),
            metric_rule("overrides", group_wait_seconds=5, group_interval_seconds=20, repeat_interval_seconds=3600),
        ],
        cluster_groups=[g1(group_wait_seconds=30, group_interval_seconds=60, repeat_interval_seconds=300)],
        secret_store=secrets,
    ).reconcile()

    group_route = published_config(secrets)["route"]["routes"][0]
    assert (group_route["group_wait"], group_route["group_interval"], group_route["repeat_interval"]) == ("30s", "1m", "5m")

    inherits, overrides = group_route["routes"]
    assert inherits == {"match": {"rule_id": "c1:g1_inherits"}, "group_wait": "30s", "repeat_interval": "5m"}
    assert overrides == {
        "match": {"rule_id": "c1:g1_overrides"},
        "group_wait": "5s",
        "group_interval": "20s",
        "repeat_interval": "1h",
    }


def test_event_rule_gets_fast_child_next_to_metric_sibling():
    secrets = InMemorySecretStore()
    build_syncer(cluster_rules=[metric_rule("m1"), event_rule("e1")], cluster_groups=[g1()], secret_store=secrets).reconcile()

    group_route = published_config(secrets)["route"]["routes"][0]
    event_route, metric_route = group_route["routes"]
    assert event_route["match"] == {"alert_type": "event", "rule_id": "c1:g1_e1"}
    assert event_route["group_interval"] == "1s"
    assert metric_route["match"] == {"rule_id": "c1:g1_m1"}
    assert "group_interval" not in metric_route
    assert "group_interval" not in group_route


def test_project_rules_route_by_project_scope_table():
    secrets = InMemorySecretStore()
    rules = InMemoryPrometheusRuleStore()
    build_syncer(
        project_rules=[
            project_rule("ev1", {"kind": "event", "resourceKind": "Pod"}),
            project_rule("pm1", {"kind": "metric", "expression": "up"}),
            project_rule("pod1", {"kind": "pod", "podName": "web-0"}),
            project_rule("foreign", {"kind": "metric", "expression": "up"}, project="c2:p9", group="p9:pg"),
        ],
        project_groups=[AlertGroup(namespace="p1", name="pg", scope="project", recipients=[Recipient(notifier_name="c1:hook1")])],
        secret_store=secrets,
        rule_store=rules,
    ).reconcile()

    doc = published_config(secrets)
    assert [r["name"] for r in doc["receivers"]] == ["default", "p1:pg"]
    children = [r["match"]["rule_id"] for r in doc["route"]["routes"][0]["routes"]]
    assert children == ["p1:pg_pm1", "p1:pg_pod1"]
    assert list(rules.rules) == ["cattle-prometheus-p1/p1"]


def test_missing_group_is_tolerated():
    secrets = InMemorySecretStore()
    rules = InMemoryPrometheusRuleStore()
    syncer = build_syncer(cluster_rules=[metric_rule("r1", group="gone")], secret_store=secrets, rule_store=rules)

    assert syncer.reconcile() == SyncOutcome.PUBLISHED
    assert published_config(secrets)["receivers"] == [{"name": "default"}]
    assert "cattle-prometheus/c1" in rules.rules


def test_not_deployed_and_not_ready_skip_publishing():
    secrets = InMemorySecretStore()
    assert build_syncer(status=StaticAlertmanagerStatus(deployed=False), secret_store=secrets).reconcile() == SyncOutcome.NOT_DEPLOYED
    assert build_syncer(status=StaticAlertmanagerStatus(endpoint=None), secret_store=secrets).reconcile() == SyncOutcome.NOT_READY
    assert secrets.update_calls == 0


@pytest.mark.parametrize("lister,message", [
    ("notifier_lister", "List notifiers"),
    ("cluster_rule_lister", "List cluster alert rules"),
    ("project_rule_lister", "List project alert rules"),
])
def test_listing_failures_are_wrapped(lister, message):
    syncer = build_syncer(**{lister: FailingLister()})
    with pytest.raises(BackingStoreError, match=message):
        syncer.reconcile()


def test_group_lookup_failure_aborts():
    secrets = InMemorySecretStore()
    syncer = build_syncer(cluster_rules=[metric_rule("r1")], cluster_group_lister=FailingLister(), secret_store=secrets)
    with pytest.raises(BackingStoreError, match="get cluster alert group c1:g1 failed"):
        syncer.reconcile()
    assert secrets.update_calls == 0


def test_secret_write_failure_raises_publish_error():
    class BrokenSecretStore(InMemorySecretStore):
        def update(self, namespace, name, data):
            raise OSError("disk full")

    with pytest.raises(PublishError, match="Update secrets"):
        build_syncer(secret_store=BrokenSecretStore()).reconcile()


def test_existing_secret_keys_are_preserved():
    secrets = InMemorySecretStore({SECRET: {"extra.tmpl": b"keep"}})
    build_syncer(secret_store=secrets).reconcile()
    assert secrets.secrets[SECRET]["extra.tmpl"] == b"keep"
