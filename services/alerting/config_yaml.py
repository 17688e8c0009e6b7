"""
YAML serialization for generated artifacts. Empty values are dropped so unset optional fields never show up in the output, and keys keep model field order, which makes the rendered bytes a stable function of the model contents.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Any

import yaml

from models.alerting.prometheus_rules import RuleGroup
from models.alerting.receivers import AlertmanagerConfig
from services.alerting.errors import PublishError

_EMPTY = (None, "", [], {})


def prune_empty(value: Any) -> Any:
    if isinstance(value, dict):
        pruned = {k: prune_empty(v) for k, v in value.items()}
        return {k: v for k, v in pruned.items() if not _is_empty(v)}
    if isinstance(value, list):
        return [prune_empty(v) for v in value]
    return value


def _is_empty(value: Any) -> bool:
    # False and 0 are meaningful settings and must survive.
    if isinstance(value, bool) or isinstance(value, (int, float)):
        return False
    return value in _EMPTY


def _dump(data: Any) -> bytes:
    return yaml.safe_dump(
        data,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    ).encode("utf-8")


def dump_config(alertmanager_config: AlertmanagerConfig) -> bytes:
    try:
        data = prune_empty(alertmanager_config.model_dump(mode="json", by_alias=True))
        return _dump(data)
    except (yaml.YAMLError, ValueError, TypeError) as exc:
        raise PublishError(f"Marshal secrets: {exc}") from exc


def dump_rule_group(rule_group: RuleGroup) -> bytes:
    return _dump(prune_empty(rule_group.model_dump(mode="json", by_alias=True)))


def load_rule_groups(payload: str) -> dict:
    """Parse a Mimir ruler listing, `{namespace: [rule group, ...]}`, into a plain mapping."""
    loaded = yaml.safe_load(payload) if payload else None
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError("rule listing must be a mapping of namespace to rule groups")
    return loaded
