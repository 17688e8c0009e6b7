"""
Module defines Pydantic models mirroring the Alertmanager configuration file: global settings, receivers with their channel configurations, and the routing tree. Field order follows the order Alertmanager documents them in, which keeps the serialized document stable between runs.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

DESC_RECEIVER_NAME = "Receiver name"
DESC_RECEIVER_EMAIL_CONFIGS = "Email configurations for this receiver"
DESC_RECEIVER_SLACK_CONFIGS = "Slack configurations for this receiver"
DESC_RECEIVER_WEBHOOK_CONFIGS = "Webhook configurations for this receiver"
DESC_RECEIVER_PAGERDUTY_CONFIGS = "PagerDuty configurations for this receiver"
DESC_ROUTE_MATCH = "Label matchers selecting the alerts handled by this route"
DESC_ROUTE_ROUTES = "Child routes"


class PagerdutyReceiverConfig(BaseModel):
    service_key: str
    description: str


class WebhookReceiverConfig(BaseModel):
    url: str


class SlackReceiverConfig(BaseModel):
    api_url: str
    channel: str
    title: str
    title_link: str = ""
    text: str
    color: str


class EmailReceiverConfig(BaseModel):
    to: str
    from_: str = Field("", alias="from")
    smarthost: str
    auth_username: str = ""
    auth_password: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    html: str
    require_tls: bool = False
    model_config = ConfigDict(populate_by_name=True)


class Receiver(BaseModel):
    name: str = Field(..., description=DESC_RECEIVER_NAME)
    email_configs: List[EmailReceiverConfig] = Field(default_factory=list, description=DESC_RECEIVER_EMAIL_CONFIGS)
    pagerduty_configs: List[PagerdutyReceiverConfig] = Field(default_factory=list, description=DESC_RECEIVER_PAGERDUTY_CONFIGS)
    slack_configs: List[SlackReceiverConfig] = Field(default_factory=list, description=DESC_RECEIVER_SLACK_CONFIGS)
    webhook_configs: List[WebhookReceiverConfig] = Field(default_factory=list, description=DESC_RECEIVER_WEBHOOK_CONFIGS)


class Route(BaseModel):
    receiver: Optional[str] = None
    group_by: List[str] = Field(default_factory=list)
    match: Dict[str, str] = Field(default_factory=dict, description=DESC_ROUTE_MATCH)
    routes: List["Route"] = Field(default_factory=list, description=DESC_ROUTE_ROUTES)
    group_wait: Optional[str] = None
    group_interval: Optional[str] = None
    repeat_interval: Optional[str] = None


class GlobalConfig(BaseModel):
    resolve_timeout: str = "5m"
    smtp_require_tls: bool = False
    pagerduty_url: Optional[str] = None


class AlertmanagerConfig(BaseModel):
    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    route: Route
    receivers: List[Receiver] = Field(default_factory=list)
    templates: List[str] = Field(default_factory=list)
    model_config = ConfigDict(populate_by_name=True)
