"""
Static Alertmanager material: the notification template published next to the generated configuration, the Go template snippets referenced by receiver configs, and the default configuration every reconcile starts from.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from config import config
from models.alerting.receivers import AlertmanagerConfig, GlobalConfig, Receiver, Route
from services.alerting.routes import format_duration

DEFAULT_RECEIVER = "default"
TEMPLATE_PATH = "/etc/alertmanager/config/notification.tmpl"

TITLE_TEMPLATE = '{{ template "notification.title" . }}'
SLACK_TEXT_TEMPLATE = '{{ template "slack.text" . }}'
EMAIL_HTML_TEMPLATE = '{{ template "email.text" . }}'
SLACK_COLOR_TEMPLATE = (
    '{{ if eq (index .Alerts 0).Labels.severity "critical" }}danger'
    '{{ else if eq (index .Alerts 0).Labels.severity "warning" }}warning'
    '{{ else }}good{{ end }}'
)

NOTIFICATION_TMPL = """{{- define "notification.title" -}}
{{- with index .Alerts 0 -}}
{{- if eq .Labels.alert_type "event" -}}
[{{ .Labels.severity }}] {{ .Labels.alert_name }}: {{ .Labels.event_type }} event on {{ .Labels.resource_kind }}
{{- else if eq .Labels.alert_type "metric" -}}
[{{ .Labels.severity }}] {{ .Labels.alert_name }}: {{ .Labels.expression }} {{ .Labels.comparison }} {{ .Labels.threshold_value }}
{{- else -}}
[{{ .Labels.severity }}] {{ .Labels.alert_name }}
{{- end -}}
{{- end -}}
{{- end -}}

{{- define "slack.text" -}}
{{ range .Alerts -}}
*Cluster:* {{ .Labels.cluster_name }}
{{ if .Labels.project_name }}*Project:* {{ .Labels.project_name }}
{{ end -}}
*Group:* {{ .Labels.group_id }}
*Rule:* {{ .Labels.rule_id }}
{{ if .Labels.expression }}*Expression:* {{ .Labels.expression }}
{{ end -}}
{{ if .Annotations.description }}*Description:* {{ .Annotations.description }}
{{ end -}}
*Started:* {{ .StartsAt.Format "2006-01-02 15:04:05 MST" }}
{{ end -}}
{{- end -}}

{{- define "email.text" -}}
<html>
<body>
{{ range .Alerts -}}
<h3>{{ .Labels.alert_name }}</h3>
<table>
<tr><td>Cluster</td><td>{{ .Labels.cluster_name }}</td></tr>
{{ if .Labels.project_name }}<tr><td>Project</td><td>{{ .Labels.project_name }}</td></tr>
{{ end -}}
<tr><td>Severity</td><td>{{ .Labels.severity }}</td></tr>
<tr><td>Group</td><td>{{ .Labels.group_id }}</td></tr>
<tr><td>Rule</td><td>{{ .Labels.rule_id }}</td></tr>
{{ if .Labels.expression }}<tr><td>Expression</td><td>{{ .Labels.expression }}</td></tr>
{{ end -}}
<tr><td>Started</td><td>{{ .StartsAt.Format "2006-01-02 15:04:05 MST" }}</td></tr>
</table>
{{ end -}}
</body>
</html>
{{- end -}}
"""


def get_default_config() -> AlertmanagerConfig:
    return AlertmanagerConfig(
        global_=GlobalConfig(resolve_timeout="5m", smtp_require_tls=False),
        route=Route(
            receiver=DEFAULT_RECEIVER,
            group_by=["group_id", "rule_id"],
            group_wait="1m",
            group_interval=format_duration(config.DEFAULT_GROUP_INTERVAL_SECONDS),
            repeat_interval="1h",
        ),
        receivers=[Receiver(name=DEFAULT_RECEIVER)],
        templates=[TEMPLATE_PATH],
    )


def get_sync_config() -> AlertmanagerConfig:
    """Default configuration with the incident webhook URL every generated document carries."""
    alertmanager_config = get_default_config()
    alertmanager_config.global_.pagerduty_url = config.PAGERDUTY_URL
    return alertmanager_config
