"""
Alert parser grouping the alerts of an Alertmanager payload into trap-sized buckets. Each alert is mapped to a firing OID and a resolution OID, alerts sharing the same OID combination and payload group end up in the same bucket, and the bucket severity is raised to the worst severity among its firing alerts.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models.alerting.alerts import Alert, AlertBucket, AlertGroup, AlertsData
from services.alerting.oids import require_oid
from services.alerting.severities import SeverityRanking

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlertParserConfiguration:
    severities: List[str] = field(default_factory=lambda: ["critical", "warning", "info"])
    severity_label: str = "severity"
    default_severity: str = "critical"
    trap_default_oid: str = "1.3.6.1.4.1.98789.1"
    trap_oid_label: str = "oid"
    trap_resolution_default_oid: Optional[str] = None
    trap_resolution_oid_label: Optional[str] = None

    @classmethod
    def from_config(cls, config) -> "AlertParserConfiguration":
        return cls(
            severities=list(config.ALERT_SEVERITIES),
            severity_label=config.ALERT_SEVERITY_LABEL,
            default_severity=config.ALERT_DEFAULT_SEVERITY,
            trap_default_oid=config.TRAP_DEFAULT_OID,
            trap_oid_label=config.TRAP_OID_LABEL,
            trap_resolution_default_oid=config.TRAP_RESOLUTION_DEFAULT_OID,
            trap_resolution_oid_label=config.TRAP_RESOLUTION_OID_LABEL,
        )

    @property
    def splits_resolution(self) -> bool:
        return self.trap_resolution_default_oid is not None or self.trap_resolution_oid_label is not None


def generate_group_id(group_labels: Dict[str, str]) -> str:
    return ",".join(f"{name}={value}" for name, value in sorted(group_labels.items()))


class AlertParser:

    def __init__(self, configuration: AlertParserConfiguration) -> None:
        self.configuration = configuration
        self.ranking = SeverityRanking(configuration.severities)
        require_oid(configuration.trap_default_oid)
        if configuration.trap_resolution_default_oid is not None:
            require_oid(configuration.trap_resolution_default_oid)

    def parse(self, alerts_data: AlertsData) -> AlertBucket:
        alert_groups: Dict[str, AlertGroup] = {}
        group_id = generate_group_id(alerts_data.group_labels)

        for alert in alerts_data.alerts:
            firing_oid = self.get_firing_oid(alert)
            resolution_oid = self.get_resolution_oid(alert, firing_oid)
            trap_oid = firing_oid if alert.is_firing else resolution_oid
            grouping_oid = firing_oid if firing_oid == resolution_oid else f"{firing_oid}-{resolution_oid}"
            logger.debug(
                "Alert %s resolved to firing OID %s and resolution OID %s",
                alert.label("alertname"),
                firing_oid,
                resolution_oid,
            )

            key = f"{grouping_oid}[{group_id}]"
            group = alert_groups.get(key)
            if group is None:
                group = AlertGroup(
                    oid=trap_oid,
                    group_id=group_id,
                    group_labels=dict(alerts_data.group_labels),
                    common_labels=dict(alerts_data.common_labels),
                    common_annotations=dict(alerts_data.common_annotations),
                    severity=self.ranking.lowest,
                )
                alert_groups[key] = group
                logger.debug("Created alert group %s", key)

            group.declared_alerts.append(alert)
            if alert.is_firing:
                self._add_firing_alert(group, alert)

        return AlertBucket(alert_groups=alert_groups)

    def _add_firing_alert(self, group: AlertGroup, alert: Alert) -> None:
        severity = alert.label(self.configuration.severity_label)
        if severity is None:
            severity = self.configuration.default_severity

        if self.ranking.is_higher_priority(severity, group.severity):
            group.severity = severity
        group.alerts.append(alert)

    def get_firing_oid(self, alert: Alert) -> str:
        oid = alert.label(self.configuration.trap_oid_label)
        if oid is None:
            oid = self.configuration.trap_default_oid
        return require_oid(oid)

    def get_resolution_oid(self, alert: Alert, firing_oid: str) -> str:
        oid = alert.label(self.configuration.trap_resolution_oid_label)
        if oid is None:
            oid = self.configuration.trap_resolution_default_oid
        if oid is None:
            oid = firing_oid
        return require_oid(oid)
