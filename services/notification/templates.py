"""
Template rendering for trap contents, wrapping Jinja2 behind a narrow render(name, data) interface. Templates are rendered with StrictUndefined so that a template referencing a missing field fails instead of silently producing empty text. The helpers available to templates group alerts by label, by alert name or by status.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from services.alerting.errors import TemplateRenderError

logger = logging.getLogger(__name__)

DESCRIPTION_TEMPLATE_NAME = "description"
NO_LABEL_VALUE = "<none>"

DEFAULT_DESCRIPTION_TEMPLATE = """
{%- if alerts -%}
{%- for severity, severity_alerts in group_alerts_by_label(alerts, "severity").items() -%}
Status: {{ severity }}
{%- for alert in severity_alerts %}
- Alert: {{ alert.labels.get("alertname", "") }}
  Summary: {{ alert.annotations.get("summary", "") }}
  Description: {{ alert.annotations.get("description", "") }}
{% endfor %}
{% endfor %}
{%- else -%}
Status: OK
{%- endif -%}
"""


def _alert_label(alert: Any, label: str) -> str:
    labels = getattr(alert, "labels", None)
    if labels is None and isinstance(alert, Mapping):
        labels = alert.get("labels")
    value = (labels or {}).get(label)
    return NO_LABEL_VALUE if value is None else value


def group_alerts_by_label(alerts: Iterable[Any], label: str) -> Dict[str, List[Any]]:
    groups: Dict[str, List[Any]] = {}
    for alert in alerts:
        groups.setdefault(_alert_label(alert, label), []).append(alert)
    return groups


def group_alerts_by_name(alerts: Iterable[Any]) -> Dict[str, List[Any]]:
    return group_alerts_by_label(alerts, "alertname")


def group_alerts_by_status(alerts: Iterable[Any]) -> Dict[str, List[Any]]:
    groups: Dict[str, List[Any]] = {}
    for alert in alerts:
        status = getattr(alert, "status", None) or NO_LABEL_VALUE
        groups.setdefault(status, []).append(alert)
    return groups


def build_environment() -> Environment:
    env = Environment(undefined=StrictUndefined, autoescape=False, keep_trailing_newline=False)
    env.globals.update(
        group_alerts_by_label=group_alerts_by_label,
        group_alerts_by_name=group_alerts_by_name,
        group_alerts_by_status=group_alerts_by_status,
    )
    return env


class TemplateRenderer:

    def __init__(self, environment: Environment | None = None) -> None:
        self._env = environment or build_environment()
        self._templates: Dict[str, Template] = {}

    def register(self, name: str, source: str) -> None:
        try:
            self._templates[name] = self._env.from_string(source)
        except TemplateError as exc:
            raise TemplateRenderError(name, str(exc)) from exc

    def register_file(self, name: str, path: str) -> None:
        try:
            source = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise TemplateRenderError(name, f"cannot read {path}: {exc}") from exc
        self.register(name, source)
        logger.info("Loaded template %s from %s", name, path)

    def has(self, name: str) -> bool:
        return name in self._templates

    def render(self, name: str, data: Mapping[str, Any]) -> str:
        template = self._templates.get(name)
        if template is None:
            raise TemplateRenderError(name, "template is not registered")
        try:
            return template.render(**data)
        except (TemplateError, TypeError, ValueError, KeyError, AttributeError) as exc:
            raise TemplateRenderError(name, str(exc)) from exc
