"""
Readiness check for the Alertmanager deployment the generated configuration is published to.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Optional

import httpx

from config import config
from services.alerting.errors import NotReadyError
from services.common.http_client import create_client

logger = logging.getLogger(__name__)


class HttpAlertmanagerStatus:
    def __init__(
        self,
        alertmanager_url: Optional[str] = None,
        deployed: Optional[bool] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.alertmanager_url = (alertmanager_url or config.ALERTMANAGER_URL).rstrip("/")
        self._deployed = config.ALERTMANAGER_DEPLOYED if deployed is None else deployed
        self._client = client or create_client(config.DEFAULT_TIMEOUT)

    @property
    def is_deployed(self) -> bool:
        return self._deployed

    def get_endpoint(self) -> str:
        try:
            response = self._client.get(f"{self.alertmanager_url}/-/ready")
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.debug("Alertmanager readiness check failed: %s", exc)
            raise NotReadyError(f"alertmanager at {self.alertmanager_url} is not ready: {exc}") from exc
        return self.alertmanager_url
