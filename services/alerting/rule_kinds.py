"""
Rule classification and scope-dependent dispatch. A rule's payload kind decides which child route, if any, it contributes under its group route, and the allowed kinds differ between cluster and project scope: events only route at cluster scope, pods and workloads only at project scope.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Callable, Dict, Optional, Union

from models.alerting.groups import Scope
from models.alerting.receivers import Route
from models.alerting.rules import AlertRule, RuleKind
from services.alerting.identifiers import get_rule_id
from services.alerting.routes import Timing, append_route, new_event_route, new_rule_route

logger = logging.getLogger(__name__)

RouteHandler = Callable[[Route, Timing, str, AlertRule], None]


def _add_event_route(group_route: Route, group_timing: Timing, group_id: str, rule: AlertRule) -> None:
    rule_id = get_rule_id(group_id, rule.name)
    append_route(group_route, new_event_route(rule_id, group_timing))


def _add_rule_route(group_route: Route, group_timing: Timing, group_id: str, rule: AlertRule) -> None:
    rule_id = get_rule_id(group_id, rule.name)
    append_route(group_route, new_rule_route(rule_id, group_timing.inherit(rule), group_timing))


ROUTE_HANDLERS: Dict[Scope, Dict[RuleKind, RouteHandler]] = {
    Scope.CLUSTER: {
        RuleKind.EVENT: _add_event_route,
        RuleKind.METRIC: _add_rule_route,
        RuleKind.NODE: _add_rule_route,
        RuleKind.SYSTEM_SERVICE: _add_rule_route,
    },
    Scope.PROJECT: {
        RuleKind.METRIC: _add_rule_route,
        RuleKind.POD: _add_rule_route,
        RuleKind.WORKLOAD: _add_rule_route,
    },
}


def classify(rule: AlertRule) -> RuleKind:
    return rule.kind


def is_metric_rule(rule: AlertRule) -> bool:
    return classify(rule) == RuleKind.METRIC


def route_handler(scope: Union[Scope, str], rule: AlertRule) -> Optional[RouteHandler]:
    return ROUTE_HANDLERS[Scope(scope)].get(classify(rule))


def add_rule_route(
    scope: Union[Scope, str],
    group_route: Route,
    group_timing: Timing,
    group_id: str,
    rule: AlertRule,
) -> bool:
    handler = route_handler(scope, rule)
    if handler is None:
        logger.debug("Rule %s of kind %s does not route at %s scope", rule.name, classify(rule).value, Scope(scope).value)
        return False
    handler(group_route, group_timing, group_id, rule)
    return True
