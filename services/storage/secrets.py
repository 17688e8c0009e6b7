"""
Database-backed key/value secret store the generated Alertmanager configuration and notification template are published to. Each secret is a set of rows sharing a namespace and name, one per data key; values are Fernet-encrypted at rest when an encryption key is configured, because the rendered configuration embeds notifier credentials.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Dict, Optional

from database import get_db_session
from db_models import ConfigSecret as ConfigSecretDB
from services.common.encryption import decrypt_bytes, encrypt_bytes, encryption_enabled

logger = logging.getLogger(__name__)


class DbSecretStore:
    def get(self, namespace: str, name: str) -> Optional[Dict[str, bytes]]:
        with get_db_session() as db:
            rows = db.query(ConfigSecretDB).filter(
                ConfigSecretDB.namespace == namespace,
                ConfigSecretDB.name == name,
            ).all()
            if not rows:
                return None
            return {r.key: decrypt_bytes(r.value) if r.encrypted else r.value for r in rows}

    def update(self, namespace: str, name: str, data: Dict[str, bytes]) -> None:
        encrypt = encryption_enabled()
        with get_db_session() as db:
            existing = {
                r.key: r
                for r in db.query(ConfigSecretDB).filter(
                    ConfigSecretDB.namespace == namespace,
                    ConfigSecretDB.name == name,
                ).all()
            }
            for key, value in data.items():
                row = existing.pop(key, None)
                if row is None:
                    row = ConfigSecretDB(namespace=namespace, name=name, key=key)
                    db.add(row)
                row.value = encrypt_bytes(value) if encrypt else value
                row.encrypted = encrypt
            for row in existing.values():
                db.delete(row)
        logger.debug("Stored secret %s/%s with keys %s", namespace, name, sorted(data))
