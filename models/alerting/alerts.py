"""
Module defines Pydantic models for the Alertmanager webhook payload and the alert groups built from it before they are sent as SNMP traps.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

DESC_CURRENT_STATUS_ALERT = "Current status of the alert, firing or resolved"
DESC_KEY_VALUE_PAIRS_IDENTIFY_ALERT = "Key-value pairs that identify the alert"
DESC_ADDITIONAL_INFO_ALERT = "Additional information about the alert"
DESC_TIME_ALERT_STARTED_FIRING = "Time when the alert started firing"
DESC_TIME_ALERT_STOPPED_FIRING = "Time when the alert stopped firing"
DESC_URL_ALERT_GENERATOR = "URL of the alert generator"
DESC_UNIQUE_IDENTIFIER_ALERT = "Unique identifier for the alert"
DESC_RECEIVER_HANDLE_ALERTS = "Receiver that handled these alerts"
DESC_GROUP_LABELS = "Labels used by Alertmanager to group the alerts of the payload"
DESC_COMMON_LABELS_GROUP = "Labels shared by every alert of the payload"
DESC_COMMON_ANNOTATIONS_GROUP = "Annotations shared by every alert of the payload"
DESC_LIST_ALERTS_GROUP = "List of alerts in this payload"

FIRING = "firing"


class Alert(BaseModel):
    status: str = Field(FIRING, description=DESC_CURRENT_STATUS_ALERT)
    labels: Dict[str, str] = Field(default_factory=dict, description=DESC_KEY_VALUE_PAIRS_IDENTIFY_ALERT)
    annotations: Dict[str, str] = Field(default_factory=dict, description=DESC_ADDITIONAL_INFO_ALERT)
    starts_at: Optional[str] = Field(None, alias="startsAt", description=DESC_TIME_ALERT_STARTED_FIRING)
    ends_at: Optional[str] = Field(None, alias="endsAt", description=DESC_TIME_ALERT_STOPPED_FIRING)
    generator_url: Optional[str] = Field(None, alias="generatorURL", description=DESC_URL_ALERT_GENERATOR)
    fingerprint: Optional[str] = Field(None, description=DESC_UNIQUE_IDENTIFIER_ALERT)

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @property
    def is_firing(self) -> bool:
        return self.status == FIRING

    def label(self, name: Optional[str]) -> Optional[str]:
        """Return the label value, or None when the label is absent (an empty value is kept)."""
        if name is None:
            return None
        return self.labels.get(name)


class AlertsData(BaseModel):
    receiver: Optional[str] = Field(None, description=DESC_RECEIVER_HANDLE_ALERTS)
    status: Optional[str] = Field(None, description=DESC_CURRENT_STATUS_ALERT)
    alerts: List[Alert] = Field(default_factory=list, description=DESC_LIST_ALERTS_GROUP)
    group_labels: Dict[str, str] = Field(default_factory=dict, alias="groupLabels", description=DESC_GROUP_LABELS)
    common_labels: Dict[str, str] = Field(default_factory=dict, alias="commonLabels", description=DESC_COMMON_LABELS_GROUP)
    common_annotations: Dict[str, str] = Field(
        default_factory=dict, alias="commonAnnotations", description=DESC_COMMON_ANNOTATIONS_GROUP
    )
    external_url: Optional[str] = Field(None, alias="externalURL")
    version: Optional[str] = None
    group_key: Optional[str] = Field(None, alias="groupKey")
    truncated_alerts: int = Field(0, alias="truncatedAlerts")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class AlertGroup(BaseModel):
    """Alerts of a payload that end up in the same SNMP trap.

    ``alerts`` only holds firing alerts, ``declared_alerts`` every alert mapped
    to the trap, so an all-resolved group still knows what it clears.
    """

    oid: str
    group_id: str
    group_labels: Dict[str, str] = Field(default_factory=dict)
    common_labels: Dict[str, str] = Field(default_factory=dict)
    common_annotations: Dict[str, str] = Field(default_factory=dict)
    severity: str
    alerts: List[Alert] = Field(default_factory=list)
    declared_alerts: List[Alert] = Field(default_factory=list)

    @property
    def trap_id(self) -> str:
        return f"{self.oid}[{self.group_id}]"

    def template_context(self) -> Dict[str, object]:
        return {
            "oid": self.oid,
            "group_id": self.group_id,
            "group_labels": self.group_labels,
            "common_labels": self.common_labels,
            "common_annotations": self.common_annotations,
            "severity": self.severity,
            "alerts": self.alerts,
            "declared_alerts": self.declared_alerts,
        }


class AlertBucket(BaseModel):
    alert_groups: Dict[str, AlertGroup] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.alert_groups)
