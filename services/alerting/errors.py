"""
Exceptions raised while reconciling alerting definitions into Alertmanager and Prometheus artifacts.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""


class ConfigSyncError(Exception):
    pass


class NotReadyError(ConfigSyncError):
    """The monitoring stack is absent or its endpoint cannot be resolved yet."""


class BackingStoreError(ConfigSyncError):
    """Listing or reading declarative objects failed."""


class NotFoundError(LookupError):
    """A looked-up object does not exist. Listers raise it; callers decide whether it is fatal."""


class PublishError(ConfigSyncError):
    """Serializing or writing a generated artifact failed."""
