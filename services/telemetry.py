"""
Telemetry sinks for the notifier. The trap sender and the HTTP layer only depend on the TelemetrySink interface; the Prometheus implementation registers its counters on an injectable registry so tests do not share a process-wide one.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Optional, Protocol

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, generate_latest

OUTCOME_SUCCESS = "success"
OUTCOME_FAILURE = "failure"


class TelemetrySink(Protocol):
    def record_trap_outcome(self, destination: str, outcome: str, count: int = 1) -> None: ...

    def record_request(self, status_code: int) -> None: ...


class PrometheusTelemetry:

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.requests_total = Counter(
            "snmp_notifier_requests_total",
            "Requests processed, by status code.",
            labelnames=["code"],
            registry=self.registry,
        )
        self.traps_total = Counter(
            "snmp_notifier_traps_total",
            "Traps sent, by SNMP destination and outcome.",
            labelnames=["destination", "outcome"],
            registry=self.registry,
        )

    def record_trap_outcome(self, destination: str, outcome: str, count: int = 1) -> None:
        if count <= 0:
            return
        self.traps_total.labels(destination=destination, outcome=outcome).inc(count)

    def record_request(self, status_code: int) -> None:
        self.requests_total.labels(code=str(status_code)).inc()

    def trap_count(self, destination: str, outcome: str) -> float:
        value = self.registry.get_sample_value(
            "snmp_notifier_traps_total", {"destination": destination, "outcome": outcome}
        )
        return value or 0.0

    def request_count(self, status_code: int) -> float:
        value = self.registry.get_sample_value("snmp_notifier_requests_total", {"code": str(status_code)})
        return value or 0.0

    def get_metrics(self) -> tuple[bytes, str]:
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
