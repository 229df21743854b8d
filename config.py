"""
Configuration management for the SNMP notifier, loading settings from environment variables with support for defaults, type conversion, and validation. This module defines a `Config` class that encapsulates all configuration options for the application: HTTP server settings, the severity ranking and labels used to bucket alerts, the trap OIDs and object layout, the trap templates, and the SNMP destinations with their version and security parameters. Every OID is validated at startup so that a misconfiguration is reported before the first alert is received.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
import os
from typing import Dict, List, Optional, Tuple

from services.alerting.oids import is_oid
from services.notification.trap_builder import MINIMUM_USER_OBJECT_SUB_OID

logger = logging.getLogger(__name__)

ENV_PREFIX = "SNMP_NOTIFIER_"

DEFAULT_TRAP_OID = "1.3.6.1.4.1.98789.1"
DEFAULT_OBJECTS_BASE_OID = "1.3.6.1.4.1.98789.2"
DEFAULT_USER_OBJECTS_BASE_OID = "1.3.6.1.4.1.98789.3"
DEFAULT_SNMP_PORT = 162


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _to_list(value: Optional[str], default: Optional[List[str]] = None) -> List[str]:
    if value is None:
        return default or []
    parsed = [item.strip() for item in value.split(",") if item.strip()]
    return parsed if parsed else (default or [])


def _to_float(value: Optional[str]) -> Optional[float]:
    value = _optional(value)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Invalid number: {value}") from exc


def parse_destination(value: str) -> Tuple[str, int]:
    text = value.strip()
    if text.startswith("["):
        host, _, rest = text[1:].partition("]")
        port_text = rest[1:] if rest.startswith(":") else ""
    elif text.count(":") == 1:
        host, _, port_text = text.partition(":")
    else:
        host, port_text = text, ""
    if not host:
        raise ValueError(f"Invalid SNMP destination: {value}")
    if not port_text:
        return host, DEFAULT_SNMP_PORT
    try:
        port = int(port_text)
    except ValueError as exc:
        raise ValueError(f"Invalid SNMP destination port: {value}") from exc
    if not (1 <= port <= 65535):
        raise ValueError(f"Invalid SNMP destination port: {value}")
    return host, port


def parse_user_objects(value: Optional[str]) -> Dict[int, str]:
    user_objects: Dict[int, str] = {}
    for item in _to_list(value):
        sub_oid_text, separator, template_path = item.partition("=")
        try:
            sub_oid = int(sub_oid_text.strip())
        except ValueError as exc:
            raise ValueError(
                f"invalid object ID: {sub_oid_text}. Object ID must be a number greater or equal to {MINIMUM_USER_OBJECT_SUB_OID}"
            ) from exc
        if not separator or not template_path.strip():
            raise ValueError(f"missing template for user object {sub_oid}")
        if sub_oid < MINIMUM_USER_OBJECT_SUB_OID:
            raise ValueError(
                f"invalid object ID: {sub_oid}. Object ID must be a number greater or equal to {MINIMUM_USER_OBJECT_SUB_OID}"
            )
        if sub_oid in user_objects:
            raise ValueError(f"invalid object ID: {sub_oid} defined twice")
        user_objects[sub_oid] = template_path.strip()
    return dict(sorted(user_objects.items()))


class Config:
    def __init__(self) -> None:
        # Server configuration
        self.HOST: str = _env("HOST", "0.0.0.0")
        self.PORT: int = int(_env("PORT", "9464"))
        self.LOG_LEVEL: str = _env("LOG_LEVEL", "info")

        # Alert bucketing
        self.ALERT_SEVERITY_LABEL: str = _env("ALERT_SEVERITY_LABEL", "severity")
        self.ALERT_SEVERITIES: List[str] = _to_list(
            _env("ALERT_SEVERITIES"), default=["critical", "warning", "info"]
        )
        self.ALERT_DEFAULT_SEVERITY: str = _env("ALERT_DEFAULT_SEVERITY", "critical")

        # Trap OIDs and objects
        self.TRAP_DEFAULT_OID: str = _env("TRAP_DEFAULT_OID", DEFAULT_TRAP_OID)
        self.TRAP_OID_LABEL: str = _env("TRAP_OID_LABEL", "oid")
        self.TRAP_RESOLUTION_DEFAULT_OID: Optional[str] = _optional(_env("TRAP_RESOLUTION_DEFAULT_OID"))
        self.TRAP_RESOLUTION_OID_LABEL: Optional[str] = _optional(_env("TRAP_RESOLUTION_OID_LABEL"))
        # An empty value selects the legacy layout: trap OID <oid>.1 and objects under <oid>.2
        self.TRAP_DEFAULT_OBJECTS_BASE_OID: Optional[str] = _optional(
            _env("TRAP_DEFAULT_OBJECTS_BASE_OID", DEFAULT_OBJECTS_BASE_OID)
        )
        self.TRAP_USER_OBJECTS_BASE_OID: Optional[str] = _optional(
            _env("TRAP_USER_OBJECTS_BASE_OID", DEFAULT_USER_OBJECTS_BASE_OID)
        )
        self.TRAP_DESCRIPTION_TEMPLATE: Optional[str] = _optional(_env("TRAP_DESCRIPTION_TEMPLATE"))
        self.TRAP_USER_OBJECTS: Dict[int, str] = parse_user_objects(_env("TRAP_USER_OBJECTS"))

        # SNMP destinations
        self.SNMP_VERSION: str = _env("SNMP_VERSION", "V2c")
        self.SNMP_DESTINATIONS: List[Tuple[str, int]] = [
            parse_destination(item) for item in _to_list(_env("SNMP_DESTINATIONS"), default=["127.0.0.1:162"])
        ]
        self.SNMP_RETRIES: int = int(_env("SNMP_RETRIES", "1"))
        self.SNMP_TIMEOUT: float = float(_env("SNMP_TIMEOUT", "5.0"))
        self.SNMP_ENGINE_START_TIME: Optional[float] = _to_float(_env("ENGINE_START_TIME"))

        # V2c only
        self.SNMP_COMMUNITY: str = _env("COMMUNITY", "public")

        # V3 only
        self.SNMP_AUTH_ENABLED: bool = _to_bool(_env("AUTH_ENABLED"), default=False)
        self.SNMP_AUTH_PROTOCOL: str = _env("AUTH_PROTOCOL", "MD5").strip().upper()
        self.SNMP_AUTH_USERNAME: Optional[str] = _optional(_env("AUTH_USERNAME"))
        self.SNMP_AUTH_PASSWORD: Optional[str] = _env("AUTH_PASSWORD")
        self.SNMP_PRIV_ENABLED: bool = _to_bool(_env("PRIV_ENABLED"), default=False)
        self.SNMP_PRIV_PROTOCOL: str = _env("PRIV_PROTOCOL", "DES").strip().upper()
        self.SNMP_PRIV_PASSWORD: Optional[str] = _env("PRIV_PASSWORD")
        self.SNMP_SECURITY_ENGINE_ID: Optional[str] = _optional(_env("SECURITY_ENGINE_ID"))
        self.SNMP_CONTEXT_ENGINE_ID: Optional[str] = _optional(_env("CONTEXT_ENGINE_ID"))
        self.SNMP_CONTEXT_NAME: Optional[str] = _optional(_env("CONTEXT_NAME"))

        self.validate()

    def validate(self) -> None:
        if not self.ALERT_SEVERITIES:
            raise ValueError("ALERT_SEVERITIES must contain at least one severity")
        if self.ALERT_DEFAULT_SEVERITY not in self.ALERT_SEVERITIES:
            raise ValueError(
                f"ALERT_DEFAULT_SEVERITY '{self.ALERT_DEFAULT_SEVERITY}' is not one of {self.ALERT_SEVERITIES}"
            )

        if not is_oid(self.TRAP_DEFAULT_OID):
            raise ValueError(f"invalid default trap OID provided: {self.TRAP_DEFAULT_OID}")
        if self.TRAP_RESOLUTION_DEFAULT_OID is not None and not is_oid(self.TRAP_RESOLUTION_DEFAULT_OID):
            raise ValueError(f"invalid resolution trap OID provided: {self.TRAP_RESOLUTION_DEFAULT_OID}")
        if self.TRAP_DEFAULT_OBJECTS_BASE_OID is not None:
            if not is_oid(self.TRAP_DEFAULT_OBJECTS_BASE_OID):
                raise ValueError(f"invalid default objects base OID provided: {self.TRAP_DEFAULT_OBJECTS_BASE_OID}")
            if self.TRAP_DEFAULT_OBJECTS_BASE_OID == self.TRAP_DEFAULT_OID:
                raise ValueError("TRAP_DEFAULT_OBJECTS_BASE_OID must differ from TRAP_DEFAULT_OID")
        if self.TRAP_USER_OBJECTS_BASE_OID is not None and not is_oid(self.TRAP_USER_OBJECTS_BASE_OID):
            raise ValueError(f"invalid user objects base OID provided: {self.TRAP_USER_OBJECTS_BASE_OID}")

        if self.SNMP_VERSION not in ("V2c", "V3"):
            raise ValueError(f"Unsupported SNMP_VERSION '{self.SNMP_VERSION}'. Allowed values: ['V2c', 'V3']")
        if not self.SNMP_DESTINATIONS:
            raise ValueError("At least one SNMP destination must be configured")
        if self.SNMP_RETRIES < 0:
            raise ValueError("SNMP_RETRIES cannot be negative")
        if self.SNMP_TIMEOUT <= 0:
            raise ValueError("SNMP_TIMEOUT must be greater than 0")

        if self.SNMP_VERSION == "V2c" and (self.SNMP_AUTH_ENABLED or self.SNMP_PRIV_ENABLED):
            raise ValueError("SNMP authentication or private only available with SNMP v3")
        if self.SNMP_PRIV_ENABLED and not self.SNMP_AUTH_ENABLED:
            raise ValueError("SNMP private encryption requires authentication enabled")
        if self.SNMP_AUTH_ENABLED and self.SNMP_AUTH_PROTOCOL not in ("MD5", "SHA"):
            raise ValueError(f"Unsupported SNMP authentication protocol '{self.SNMP_AUTH_PROTOCOL}'")
        if self.SNMP_AUTH_ENABLED and not self.SNMP_AUTH_PASSWORD:
            raise ValueError("SNMP authentication requires an authentication password")
        if self.SNMP_PRIV_ENABLED and self.SNMP_PRIV_PROTOCOL not in ("DES", "AES"):
            raise ValueError(f"Unsupported SNMP private protocol '{self.SNMP_PRIV_PROTOCOL}'")
        if self.SNMP_PRIV_ENABLED and not self.SNMP_PRIV_PASSWORD:
            raise ValueError("SNMP private encryption requires a private password")
        if self.SNMP_VERSION == "V3" and not self.SNMP_AUTH_USERNAME:
            logger.warning("SNMP v3 is enabled without an authentication username")


class Constants:
    # HTTP status messages
    STATUS_HEALTHY: str = "healthy"
    STATUS_SUCCESS: str = "Success"
    STATUS_ERROR: str = "Error"
    SERVICE_NAME: str = "snmp_notifier"

config = Config()
constants = Constants()
