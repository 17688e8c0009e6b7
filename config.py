"""
Configuration management for the alerting config syncer, loading settings from environment variables with support for defaults, type conversion, and validation. This module defines a `Config` class that encapsulates the cluster identity, the locations of the Alertmanager and Mimir endpoints, the namespaces the generated artifacts are published to, and the default notification timings applied to routes when neither the alert group nor the rule overrides them.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
import os
from typing import Optional

from cryptography.fernet import Fernet

logger = logging.getLogger(__name__)


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _env_name() -> str:
    return (os.getenv("APP_ENV") or os.getenv("ENVIRONMENT") or "development").strip().lower()


def _is_production_env() -> bool:
    return _env_name() in {"prod", "production"}


class Config:
    EXAMPLE_DATABASE_URL = "sqlite:///./alertsync.db"

    def __init__(self) -> None:
        self.APP_ENV: str = _env_name()
        self.IS_PRODUCTION: bool = _is_production_env()
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "info")

        # Cluster identity
        self.CLUSTER_NAME: str = os.getenv("CLUSTER_NAME", "local")

        # Alertmanager deployment
        self.ALERTMANAGER_URL: str = os.getenv("ALERTMANAGER_URL", "http://alertmanager:9093")
        self.ALERTMANAGER_DEPLOYED: bool = _to_bool(os.getenv("ALERTMANAGER_DEPLOYED"), default=True)
        self.ALERTMANAGER_APP_NAME: str = os.getenv("ALERTMANAGER_APP_NAME", "cluster-alerting")
        self.ALERTMANAGER_APP_NAMESPACE: str = os.getenv("ALERTMANAGER_APP_NAMESPACE", "cattle-prometheus")

        # Prometheus rule publishing
        self.CLUSTER_MONITORING_NAMESPACE: str = os.getenv("CLUSTER_MONITORING_NAMESPACE", "cattle-prometheus")
        self.PROJECT_MONITORING_NAMESPACE_PREFIX: str = os.getenv("PROJECT_MONITORING_NAMESPACE_PREFIX", "cattle-prometheus")
        self.MIMIR_URL: str = os.getenv("MIMIR_URL", "http://mimir:9009")
        self.MIMIR_ORG_ID: str = os.getenv("MIMIR_ORG_ID", "anonymous")
        self.MIMIR_RULER_CONFIG_BASEPATH: str = os.getenv("MIMIR_RULER_CONFIG_BASEPATH", "/prometheus/config/v1/rules")

        # Encryption key for notifier credentials and published secrets at rest
        self.DATA_ENCRYPTION_KEY: Optional[str] = os.getenv("DATA_ENCRYPTION_KEY")

        # Database
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", self.EXAMPLE_DATABASE_URL)

        # Request settings
        self.DEFAULT_TIMEOUT: float = float(os.getenv("DEFAULT_TIMEOUT", "30.0"))
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
        self.RETRY_BACKOFF: float = float(os.getenv("RETRY_BACKOFF", "1.0"))

        # Shared upstream HTTP client pool tuning
        self.HTTP_CLIENT_MAX_CONNECTIONS: int = int(os.getenv("HTTP_CLIENT_MAX_CONNECTIONS", "20"))
        self.HTTP_CLIENT_MAX_KEEPALIVE_CONNECTIONS: int = int(os.getenv("HTTP_CLIENT_MAX_KEEPALIVE_CONNECTIONS", "10"))
        self.HTTP_CLIENT_KEEPALIVE_EXPIRY: float = float(os.getenv("HTTP_CLIENT_KEEPALIVE_EXPIRY", "30"))

        # Route timing defaults (seconds)
        self.DEFAULT_GROUP_WAIT_SECONDS: int = int(os.getenv("DEFAULT_GROUP_WAIT_SECONDS", "10"))
        self.DEFAULT_GROUP_INTERVAL_SECONDS: int = int(os.getenv("DEFAULT_GROUP_INTERVAL_SECONDS", "10"))
        self.DEFAULT_REPEAT_INTERVAL_SECONDS: int = int(os.getenv("DEFAULT_REPEAT_INTERVAL_SECONDS", "10"))
        self.EVENT_GROUP_INTERVAL_SECONDS: int = int(os.getenv("EVENT_GROUP_INTERVAL_SECONDS", "1"))

        self.PAGERDUTY_URL: str = os.getenv(
            "PAGERDUTY_URL",
            "https://events.pagerduty.com/generic/2010-04-15/create_event.json",
        )

        # Polling loop used by main.py in place of watch triggers
        self.SYNC_INTERVAL_SECONDS: float = float(os.getenv("SYNC_INTERVAL_SECONDS", "30"))

        self.validate()

    def validate(self) -> None:
        timings = {
            "DEFAULT_GROUP_WAIT_SECONDS": self.DEFAULT_GROUP_WAIT_SECONDS,
            "DEFAULT_GROUP_INTERVAL_SECONDS": self.DEFAULT_GROUP_INTERVAL_SECONDS,
            "DEFAULT_REPEAT_INTERVAL_SECONDS": self.DEFAULT_REPEAT_INTERVAL_SECONDS,
            "EVENT_GROUP_INTERVAL_SECONDS": self.EVENT_GROUP_INTERVAL_SECONDS,
        }
        for key, value in timings.items():
            if value <= 0:
                raise ValueError(f"{key} must be greater than 0")

        if not self.CLUSTER_NAME.strip():
            raise ValueError("CLUSTER_NAME must not be empty")

        if self.IS_PRODUCTION and not self.DATA_ENCRYPTION_KEY:
            raise ValueError("DATA_ENCRYPTION_KEY must be configured in production")
        if self.DATA_ENCRYPTION_KEY:
            try:
                Fernet(self.DATA_ENCRYPTION_KEY)
            except Exception as exc:
                raise ValueError("DATA_ENCRYPTION_KEY must be a valid Fernet key") from exc

        if self.IS_PRODUCTION and self.DATABASE_URL == self.EXAMPLE_DATABASE_URL:
            raise ValueError("DATABASE_URL must be set explicitly in production")


config = Config()
