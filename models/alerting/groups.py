"""
Module defines Pydantic models for alert groups and their notification recipients.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum

DESC_GROUP_NAMESPACE = "Cluster name for cluster groups, project name for project groups"
DESC_GROUP_NAME = "Alert group name"
DESC_GROUP_DISPLAY_NAME = "Human readable group name"
DESC_GROUP_RECIPIENTS = "Recipients notified for every rule in this group"
DESC_NOTIFIER_NAME = "Notifier reference in the form <cluster>:<notifier>"
DESC_RECIPIENT_OVERRIDE = "Address overriding the notifier default (channel, email, URL or service key)"
DESC_GROUP_WAIT_SECONDS = "Seconds to wait before sending the first notification for a group"
DESC_GROUP_INTERVAL_SECONDS = "Seconds to wait before notifying about new alerts in a group"
DESC_REPEAT_INTERVAL_SECONDS = "Seconds to wait before repeating a notification"


class Scope(str, Enum):
    CLUSTER = "cluster"
    PROJECT = "project"


class Recipient(BaseModel):
    notifier_name: str = Field("", alias="notifierName", description=DESC_NOTIFIER_NAME)
    recipient: str = Field("", description=DESC_RECIPIENT_OVERRIDE)
    model_config = ConfigDict(populate_by_name=True)


class TimingFields(BaseModel):
    group_wait_seconds: Optional[int] = Field(None, alias="groupWaitSeconds", ge=1, description=DESC_GROUP_WAIT_SECONDS)
    group_interval_seconds: Optional[int] = Field(None, alias="groupIntervalSeconds", ge=1, description=DESC_GROUP_INTERVAL_SECONDS)
    repeat_interval_seconds: Optional[int] = Field(None, alias="repeatIntervalSeconds", ge=1, description=DESC_REPEAT_INTERVAL_SECONDS)
    model_config = ConfigDict(use_enum_values=True, populate_by_name=True, validate_default=True)


class AlertGroup(TimingFields):
    namespace: str = Field(..., description=DESC_GROUP_NAMESPACE)
    name: str = Field(..., description=DESC_GROUP_NAME)
    scope: Scope = Field(Scope.CLUSTER)
    display_name: Optional[str] = Field(None, alias="displayName", description=DESC_GROUP_DISPLAY_NAME)
    recipients: List[Recipient] = Field(default_factory=list, description=DESC_GROUP_RECIPIENTS)
