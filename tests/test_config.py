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

from config import Config


def test_defaults_match_alertmanager_conventions():
    cfg = Config()
    assert cfg.CLUSTER_NAME == "c1"
    assert (cfg.DEFAULT_GROUP_WAIT_SECONDS, cfg.DEFAULT_GROUP_INTERVAL_SECONDS, cfg.DEFAULT_REPEAT_INTERVAL_SECONDS) == (10, 10, 10)
    assert cfg.EVENT_GROUP_INTERVAL_SECONDS == 1
    assert cfg.PAGERDUTY_URL == "https://events.pagerduty.com/generic/2010-04-15/create_event.json"


def test_non_positive_timing_is_rejected(monkeypatch):
    monkeypatch.setenv("DEFAULT_GROUP_WAIT_SECONDS", "0")
    with pytest.raises(ValueError, match="DEFAULT_GROUP_WAIT_SECONDS"):
        Config()


def test_malformed_encryption_key_is_rejected(monkeypatch):
    monkeypatch.setenv("DATA_ENCRYPTION_KEY", "not-a-key")
    with pytest.raises(ValueError, match="Fernet"):
        Config()


def test_production_requires_explicit_database(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(ValueError, match="DATABASE_URL"):
        Config()


def test_deployed_flag_parses_booleans(monkeypatch):
    monkeypatch.setenv("ALERTMANAGER_DEPLOYED", "no")
    assert Config().ALERTMANAGER_DEPLOYED is False
