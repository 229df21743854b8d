"""
Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

try:
    from ._env import ensure_test_env
except ImportError:
    from tests._env import ensure_test_env
ensure_test_env()

import pytest

from models.alerting.alerts import Alert, AlertGroup
from services.alerting.errors import TemplateRenderError
from services.notification.templates import (
    DEFAULT_DESCRIPTION_TEMPLATE,
    DESCRIPTION_TEMPLATE_NAME,
    TemplateRenderer,
    group_alerts_by_label,
    group_alerts_by_name,
    group_alerts_by_status,
)


def _alert(name, severity=None, status="firing"):
    labels = {"alertname": name}
    if severity is not None:
        labels["severity"] = severity
    return Alert(status=status, labels=labels, annotations={"summary": f"{name} summary", "description": f"{name} details"})


def _renderer():
    renderer = TemplateRenderer()
    renderer.register(DESCRIPTION_TEMPLATE_NAME, DEFAULT_DESCRIPTION_TEMPLATE)
    return renderer


def test_group_alerts_by_label_uses_placeholder_for_missing_label():
    alerts = [_alert("A", "critical"), _alert("B"), _alert("C", "critical")]
    groups = group_alerts_by_label(alerts, "severity")
    assert list(groups) == ["critical", "<none>"]
    assert [a.labels["alertname"] for a in groups["critical"]] == ["A", "C"]


def test_group_alerts_by_name_and_status():
    alerts = [_alert("A"), _alert("A", status="resolved"), _alert("B")]
    assert {k: len(v) for k, v in group_alerts_by_name(alerts).items()} == {"A": 2, "B": 1}
    assert {k: len(v) for k, v in group_alerts_by_status(alerts).items()} == {"firing": 2, "resolved": 1}


def test_default_description_lists_firing_alerts():
    group = AlertGroup(
        oid="1.1",
        group_id="alertname=A",
        severity="critical",
        alerts=[_alert("A", "critical"), _alert("B", "warning")],
    )
    text = _renderer().render(DESCRIPTION_TEMPLATE_NAME, group.template_context())
    assert "Status: critical" in text
    assert "Status: warning" in text
    assert "- Alert: A" in text
    assert "Summary: B summary" in text
    assert "Description: B details" in text


def test_default_description_reports_all_clear():
    group = AlertGroup(
        oid="1.1",
        group_id="alertname=A",
        severity="info",
        declared_alerts=[_alert("A", "critical", status="resolved")],
    )
    assert _renderer().render(DESCRIPTION_TEMPLATE_NAME, group.template_context()).strip() == "Status: OK"


def test_undefined_field_fails_rendering():
    renderer = TemplateRenderer()
    renderer.register("broken", "{{ not_a_field.value }}")
    with pytest.raises(TemplateRenderError) as exc_info:
        renderer.render("broken", {"severity": "critical"})
    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.template_name == "broken"


def test_unregistered_template_fails():
    with pytest.raises(TemplateRenderError):
        TemplateRenderer().render("missing", {})


def test_invalid_template_syntax_fails_registration():
    with pytest.raises(TemplateRenderError):
        TemplateRenderer().register("bad", "{% for %}")


def test_register_file(tmp_path):
    path = tmp_path / "object.tpl"
    path.write_text("{{ severity }} / {{ group_labels['alertname'] }}", encoding="utf-8")
    renderer = TemplateRenderer()
    renderer.register_file("object", str(path))
    assert renderer.has("object")
    assert renderer.render("object", {"severity": "warning", "group_labels": {"alertname": "A"}}) == "warning / A"


def test_register_missing_file_fails(tmp_path):
    with pytest.raises(TemplateRenderError):
        TemplateRenderer().register_file("object", str(tmp_path / "missing.tpl"))
