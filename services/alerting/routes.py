"""
Route construction for the Alertmanager routing tree. Group routes carry the receiver and the group timing; rule and event routes nest beneath them and only change how their alerts are grouped, delayed, and repeated.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from dataclasses import dataclass
from typing import Dict, Optional

from config import config
from models.alerting.groups import TimingFields
from models.alerting.receivers import Route

_DURATION_UNITS = (
    ("y", 365 * 24 * 3600),
    ("w", 7 * 24 * 3600),
    ("d", 24 * 3600),
    ("h", 3600),
    ("m", 60),
    ("s", 1),
)


@dataclass(frozen=True)
class Timing:
    group_wait: int
    group_interval: int
    repeat_interval: int

    @classmethod
    def defaults(cls) -> "Timing":
        return cls(
            group_wait=config.DEFAULT_GROUP_WAIT_SECONDS,
            group_interval=config.DEFAULT_GROUP_INTERVAL_SECONDS,
            repeat_interval=config.DEFAULT_REPEAT_INTERVAL_SECONDS,
        )

    def inherit(self, overrides: TimingFields) -> "Timing":
        """Field-wise overlay: each timing set on `overrides` replaces the inherited value."""
        return Timing(
            group_wait=overrides.group_wait_seconds or self.group_wait,
            group_interval=overrides.group_interval_seconds or self.group_interval,
            repeat_interval=overrides.repeat_interval_seconds or self.repeat_interval,
        )


def format_duration(seconds: int) -> str:
    """Render seconds the way Prometheus durations print, e.g. 90 -> 1m30s."""
    if seconds <= 0:
        return "0s"
    parts = []
    remaining = seconds
    for unit, size in _DURATION_UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count}{unit}")
    return "".join(parts)


def new_route(match: Dict[str, str], timing: Timing, parent_interval: Optional[int] = None) -> Route:
    route = Route(
        receiver=match.get("group_id"),
        match=dict(sorted(match.items())),
        group_wait=format_duration(timing.group_wait),
        repeat_interval=format_duration(timing.repeat_interval),
    )
    # Alertmanager inherits group_interval from the parent route when it is unset.
    inherited = parent_interval or config.DEFAULT_GROUP_INTERVAL_SECONDS
    if timing.group_interval != inherited:
        route.group_interval = format_duration(timing.group_interval)
    return route


def new_group_route(group_id: str, timing: Timing) -> Route:
    return new_route({"group_id": group_id}, timing)


def new_rule_route(rule_id: str, timing: Timing, parent: Timing) -> Route:
    return new_route({"rule_id": rule_id}, timing, parent.group_interval)


def new_event_route(rule_id: str, parent: Timing) -> Route:
    fast = Timing(
        group_wait=parent.group_wait,
        group_interval=config.EVENT_GROUP_INTERVAL_SECONDS,
        repeat_interval=parent.repeat_interval,
    )
    return new_route({"alert_type": "event", "rule_id": rule_id}, fast, parent.group_interval)


def append_route(route: Route, sub_route: Route) -> Route:
    route.routes.append(sub_route)
    return route
