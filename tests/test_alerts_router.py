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

from fastapi.testclient import TestClient

import main
from routers.notifier import relay_service
from services.notification import transport
from services.telemetry import OUTCOME_FAILURE, OUTCOME_SUCCESS

client = TestClient(main.app)

PAYLOAD = {
    "receiver": "snmp",
    "status": "firing",
    "alerts": [
        {
            "status": "firing",
            "labels": {"alertname": "DiskFull", "severity": "warning", "instance": "node-1"},
            "annotations": {"summary": "Disk almost full", "description": "95% used"},
            "startsAt": "2026-01-01T00:00:00Z",
            "endsAt": "0001-01-01T00:00:00Z",
            "generatorURL": "http://prometheus/graph",
            "fingerprint": "abc",
        },
        {
            "status": "resolved",
            "labels": {"alertname": "DiskFull", "severity": "critical", "oid": "1.3.6.1.4.1.98789.10"},
            "annotations": {},
        },
    ],
    "groupLabels": {"alertname": "DiskFull"},
    "commonLabels": {"alertname": "DiskFull"},
    "commonAnnotations": {},
    "externalURL": "http://alertmanager",
    "version": "4",
    "groupKey": "{}:{alertname=\"DiskFull\"}",
    "truncatedAlerts": 0,
}


class RecordingSession:
    def __init__(self, profile, sent):
        self.profile = profile
        self.sent = sent

    async def send_trap(self, trap):
        self.sent.append((self.profile.address, trap))

    def close(self):
        pass


def _install_sessions(monkeypatch, unreachable=()):
    sent = []

    async def fake_open_session(profile):
        if profile.address in unreachable:
            raise transport.SNMPTransportError("connection refused")
        return RecordingSession(profile, sent)

    monkeypatch.setattr(transport, "open_session", fake_open_session)
    return sent


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "snmp_notifier"}


def test_alerts_are_relayed_to_every_destination(monkeypatch):
    sent = _install_sessions(monkeypatch)
    before = relay_service.telemetry.request_count(200)
    successes = relay_service.telemetry.trap_count("127.0.0.1:1162", OUTCOME_SUCCESS)

    response = client.post("/alerts", json=PAYLOAD)

    assert response.status_code == 200
    assert response.json() == {"status": "Success", "traps": 2}
    assert {address for address, _ in sent} == {"127.0.0.1:1162", "127.0.0.2:1162"}
    trap_ids = {trap.trap_id for _, trap in sent}
    assert trap_ids == {
        "1.3.6.1.4.1.98789.1[alertname=DiskFull]",
        "1.3.6.1.4.1.98789.10[alertname=DiskFull]",
    }
    firing = next(trap for _, trap in sent if trap.trap_id.startswith("1.3.6.1.4.1.98789.1["))
    assert firing.value_of("1.3.6.1.4.1.98789.2.2") == "warning"
    assert "Disk almost full" in firing.value_of("1.3.6.1.4.1.98789.2.3")
    assert relay_service.telemetry.request_count(200) == before + 1
    assert relay_service.telemetry.trap_count("127.0.0.1:1162", OUTCOME_SUCCESS) == successes + 2


def test_unknown_severity_returns_400(monkeypatch):
    sent = _install_sessions(monkeypatch)
    payload = {"alerts": [{"status": "firing", "labels": {"severity": "unknown"}}], "groupLabels": {}}
    before = relay_service.telemetry.request_count(400)

    response = client.post("/alerts", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "incorrect severity: unknown"
    assert sent == []
    assert relay_service.telemetry.request_count(400) == before + 1


def test_invalid_oid_label_returns_400(monkeypatch):
    sent = _install_sessions(monkeypatch)
    payload = {"alerts": [{"labels": {"oid": "1.2.a"}}]}

    response = client.post("/alerts", json=payload)

    assert response.status_code == 400
    assert "1.2.a" in response.json()["detail"]
    assert sent == []


def test_unreachable_destination_returns_502(monkeypatch):
    sent = _install_sessions(monkeypatch, unreachable={"127.0.0.2:1162"})
    failures = relay_service.telemetry.trap_count("127.0.0.2:1162", OUTCOME_FAILURE)

    response = client.post("/alerts", json=PAYLOAD)

    assert response.status_code == 502
    assert "127.0.0.2:1162" in response.json()["detail"]
    assert {address for address, _ in sent} == {"127.0.0.1:1162"}
    assert relay_service.telemetry.trap_count("127.0.0.2:1162", OUTCOME_FAILURE) == failures + 2


def test_undecodable_body_returns_422():
    response = client.post("/alerts", content=b"not json", headers={"content-type": "application/json"})
    assert response.status_code == 422

    response = client.post("/alerts", json={"alerts": "nope"})
    assert response.status_code == 422


def test_empty_batch_sends_nothing(monkeypatch):
    sent = _install_sessions(monkeypatch)
    response = client.post("/alerts", json={"alerts": []})
    assert response.status_code == 200
    assert response.json() == {"status": "Success", "traps": 0}
    assert sent == []


def test_metrics_exposition(monkeypatch):
    _install_sessions(monkeypatch)
    client.post("/alerts", json=PAYLOAD)
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "snmp_notifier_traps_total" in response.text
    assert "snmp_notifier_requests_total" in response.text
