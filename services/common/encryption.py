"""
Encryption utilities for symmetrically encrypting and decrypting data kept at rest using Fernet encryption. Notifier channel settings carry credentials such as service keys, SMTP passwords and webhook URLs, and the published Alertmanager secret embeds those same credentials, so both are stored encrypted whenever an encryption key is configured and can be recovered only with that key.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
import json
import logging
from functools import lru_cache
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

from config import config as app_config

logger = logging.getLogger(__name__)

ENCRYPTED_MARKER = "__encrypted__"


@lru_cache(maxsize=4)
def _fernet_for(key: str) -> Fernet:
    try:
        return Fernet(key)
    except (ValueError, TypeError) as exc:
        raise RuntimeError("Invalid DATA_ENCRYPTION_KEY format") from exc


def _get_fernet() -> Fernet:
    key = app_config.DATA_ENCRYPTION_KEY
    if not key:
        raise RuntimeError("DATA_ENCRYPTION_KEY is not configured")
    return _fernet_for(key)


def encryption_enabled() -> bool:
    return bool(app_config.DATA_ENCRYPTION_KEY)


def encrypt_config(cfg: dict[str, Any]) -> dict[str, Any]:
    try:
        f = _get_fernet()
        payload = json.dumps(cfg, default=str).encode()
        return {ENCRYPTED_MARKER: f.encrypt(payload).decode()}
    except RuntimeError:
        raise
    except Exception as exc:
        raise ValueError("Failed to encrypt notifier config") from exc


def decrypt_config(cfg: dict[str, Any]) -> dict[str, Any]:
    if ENCRYPTED_MARKER not in cfg:
        return cfg
    try:
        f = _get_fernet()
        return json.loads(f.decrypt(cfg[ENCRYPTED_MARKER].encode()).decode())
    except RuntimeError:
        raise
    except InvalidToken as exc:
        raise ValueError("Cannot decrypt notifier config, wrong key or corrupted data") from exc
    except Exception as exc:
        raise ValueError("Failed to decrypt notifier config") from exc


def encrypt_bytes(data: bytes) -> bytes:
    return _get_fernet().encrypt(data)


def decrypt_bytes(token: bytes) -> bytes:
    try:
        return _get_fernet().decrypt(token)
    except InvalidToken as exc:
        raise ValueError("Cannot decrypt secret data, wrong key or corrupted data") from exc
