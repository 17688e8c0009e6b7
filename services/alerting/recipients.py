"""
Recipient resolution for alert groups. Each recipient names a notifier; the notifier's channel settings, optionally overridden by the recipient address, become one channel configuration on the group's Alertmanager receiver. Recipients whose notifier is unknown or has no channel configured are skipped without failing the reconcile.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Iterable, List, Optional

from models.alerting.groups import Recipient
from models.alerting.notifiers import Notifier
from models.alerting.receivers import (
    EmailReceiverConfig,
    PagerdutyReceiverConfig,
    Receiver,
    SlackReceiverConfig,
    WebhookReceiverConfig,
)
from services.alerting.identifiers import get_notifier_id
from services.alerting.templates import (
    EMAIL_HTML_TEMPLATE,
    SLACK_COLOR_TEMPLATE,
    SLACK_TEXT_TEMPLATE,
    TITLE_TEMPLATE,
)

logger = logging.getLogger(__name__)


def get_notifier(cluster_name: str, notifier_id: str, notifiers: Iterable[Notifier]) -> Optional[Notifier]:
    for notifier in notifiers:
        if get_notifier_id(cluster_name, notifier.name) == notifier_id:
            return notifier
    return None


def _add_channel(receiver: Receiver, notifier: Notifier, override: str) -> bool:
    if notifier.pagerduty_config is not None:
        receiver.pagerduty_configs.append(PagerdutyReceiverConfig(
            service_key=override or notifier.pagerduty_config.service_key,
            description=TITLE_TEMPLATE,
        ))
        return True

    if notifier.webhook_config is not None:
        receiver.webhook_configs.append(WebhookReceiverConfig(url=override or notifier.webhook_config.url))
        return True

    if notifier.slack_config is not None:
        slack = notifier.slack_config
        receiver.slack_configs.append(SlackReceiverConfig(
            api_url=slack.url,
            channel=override or slack.default_recipient,
            title=TITLE_TEMPLATE,
            title_link="",
            text=SLACK_TEXT_TEMPLATE,
            color=SLACK_COLOR_TEMPLATE,
        ))
        return True

    if notifier.smtp_config is not None:
        smtp = notifier.smtp_config
        receiver.email_configs.append(EmailReceiverConfig(
            to=override or smtp.default_recipient,
            from_=smtp.sender,
            smarthost=f"{smtp.host}:{smtp.port}",
            auth_username=smtp.username,
            auth_password=smtp.password,
            headers={"Subject": TITLE_TEMPLATE},
            html=EMAIL_HTML_TEMPLATE,
            require_tls=smtp.tls,
        ))
        return True

    logger.debug("Notifier %s has no channel configured", notifier.name)
    return False


def add_recipients(
    cluster_name: str,
    notifiers: List[Notifier],
    receiver: Receiver,
    recipients: Iterable[Recipient],
) -> bool:
    """Append one channel config per resolvable recipient; report whether any resolved."""
    receiver_exist = False
    for recipient in recipients:
        if not recipient.notifier_name:
            continue
        notifier = get_notifier(cluster_name, recipient.notifier_name, notifiers)
        if notifier is None:
            logger.debug("Can not find the notifier %s", recipient.notifier_name)
            continue
        if _add_channel(receiver, notifier, recipient.recipient):
            receiver_exist = True
    return receiver_exist
