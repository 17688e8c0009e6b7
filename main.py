"""
Entrypoint for the alerting config syncer. Wires the database-backed listers and secret store, the Alertmanager readiness check and the Mimir rule store into a `ConfigSyncer`, then reconciles on a fixed interval. Failed reconciles are logged and retried on the next tick.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from config import config
from database import connection_test, init_database, init_db
from models.alerting.groups import Scope
from services.alerting.alertmanager_status import HttpAlertmanagerStatus
from services.alerting.config_syncer import ConfigSyncer
from services.alerting.errors import ConfigSyncError
from services.alerting.mimir_rules import MimirRuleStore
from services.storage.alerting import DbAlertGroupLister, DbAlertRuleLister, DbNotifierLister
from services.storage.secrets import DbSecretStore

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("alertsync")


def build_syncer() -> ConfigSyncer:
    return ConfigSyncer(
        cluster_name=config.CLUSTER_NAME,
        alertmanager_status=HttpAlertmanagerStatus(),
        notifier_lister=DbNotifierLister(config.CLUSTER_NAME),
        cluster_rule_lister=DbAlertRuleLister(Scope.CLUSTER),
        project_rule_lister=DbAlertRuleLister(Scope.PROJECT),
        cluster_group_lister=DbAlertGroupLister(Scope.CLUSTER),
        project_group_lister=DbAlertGroupLister(Scope.PROJECT),
        rule_store=MimirRuleStore(),
        secret_store=DbSecretStore(),
    )


def run(stop_event: Optional[threading.Event] = None) -> None:
    stop_event = stop_event or threading.Event()
    syncer = build_syncer()
    logger.info("Alert config syncer started for cluster %s", config.CLUSTER_NAME)
    while not stop_event.is_set():
        try:
            outcome = syncer.reconcile()
            logger.debug("Reconcile finished: %s", outcome.value)
        except ConfigSyncError as exc:
            logger.error("Reconcile failed: %s", exc)
        stop_event.wait(config.SYNC_INTERVAL_SECONDS)


if __name__ == "__main__":
    init_database(config.DATABASE_URL, config.LOG_LEVEL == "debug")
    if not connection_test():
        raise SystemExit("Database is not reachable, refusing to start the alert config syncer")
    init_db()
    try:
        run()
    except KeyboardInterrupt:
        logger.info("Alert config syncer stopped")
