"""
Module defines Pydantic models for notifiers, the cluster-wide notification targets that alert group recipients point at.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from enum import Enum

DESC_NOTIFIER_NAMESPACE = "Cluster the notifier belongs to"
DESC_NOTIFIER_NAME = "Notifier name"
DESC_DEFAULT_RECIPIENT = "Recipient used when the alert group does not override it"


class ChannelType(str, Enum):
    PAGERDUTY = "pagerduty"
    WEBHOOK = "webhook"
    SLACK = "slack"
    SMTP = "smtp"


class PagerdutyConfig(BaseModel):
    service_key: str = Field(..., alias="serviceKey")
    model_config = ConfigDict(populate_by_name=True)


class WebhookConfig(BaseModel):
    url: str = Field(...)


class SlackConfig(BaseModel):
    url: str = Field(..., description="Incoming webhook URL")
    default_recipient: str = Field("", alias="defaultRecipient", description=DESC_DEFAULT_RECIPIENT)
    model_config = ConfigDict(populate_by_name=True)


class SMTPConfig(BaseModel):
    host: str = Field(...)
    port: int = Field(587, ge=1, le=65535)
    username: str = Field("")
    password: str = Field("")
    tls: bool = Field(True)
    sender: str = Field("")
    default_recipient: str = Field("", alias="defaultRecipient", description=DESC_DEFAULT_RECIPIENT)
    model_config = ConfigDict(populate_by_name=True)


class Notifier(BaseModel):
    namespace: str = Field(..., description=DESC_NOTIFIER_NAMESPACE)
    name: str = Field(..., description=DESC_NOTIFIER_NAME)
    display_name: Optional[str] = Field(None, alias="displayName")
    pagerduty_config: Optional[PagerdutyConfig] = Field(None, alias="pagerdutyConfig")
    webhook_config: Optional[WebhookConfig] = Field(None, alias="webhookConfig")
    slack_config: Optional[SlackConfig] = Field(None, alias="slackConfig")
    smtp_config: Optional[SMTPConfig] = Field(None, alias="smtpConfig")
    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _single_channel(self) -> "Notifier":
        configured = [
            c for c in (self.pagerduty_config, self.webhook_config, self.slack_config, self.smtp_config)
            if c is not None
        ]
        if len(configured) > 1:
            raise ValueError(f"notifier {self.name} configures more than one channel")
        return self

    @property
    def channel_type(self) -> Optional[ChannelType]:
        if self.pagerduty_config is not None:
            return ChannelType.PAGERDUTY
        if self.webhook_config is not None:
            return ChannelType.WEBHOOK
        if self.slack_config is not None:
            return ChannelType.SLACK
        if self.smtp_config is not None:
            return ChannelType.SMTP
        return None
