"""
Module defines Pydantic models describing the SNMP trap receivers the notifier sends to, including the version and security settings of each destination.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum

DESC_DESTINATION_HOST = "Hostname or IP address of the trap receiver"
DESC_DESTINATION_PORT = "UDP port of the trap receiver"
DESC_SNMP_RETRIES = "Number of retries performed by the SNMP engine"
DESC_SNMP_TIMEOUT = "SNMP timeout in seconds"
DESC_SNMP_VERSION = "SNMP protocol version"
DESC_SNMP_COMMUNITY = "Community string (V2c only)"
DESC_SNMP_USERNAME = "Security name (V3 only)"


class SNMPVersion(str, Enum):
    V2C = "V2c"
    V3 = "V3"


class AuthProtocol(str, Enum):
    MD5 = "MD5"
    SHA = "SHA"


class PrivProtocol(str, Enum):
    DES = "DES"
    AES = "AES"


class SecurityLevel(str, Enum):
    NO_AUTH_NO_PRIV = "noAuthNoPriv"
    AUTH_NO_PRIV = "authNoPriv"
    AUTH_PRIV = "authPriv"


class DestinationProfile(BaseModel):
    host: str = Field(..., description=DESC_DESTINATION_HOST)
    port: int = Field(162, ge=1, le=65535, description=DESC_DESTINATION_PORT)
    retries: int = Field(1, ge=0, description=DESC_SNMP_RETRIES)
    timeout: float = Field(5.0, gt=0, description=DESC_SNMP_TIMEOUT)
    version: SNMPVersion = Field(SNMPVersion.V2C, description=DESC_SNMP_VERSION)

    community: Optional[str] = Field(None, description=DESC_SNMP_COMMUNITY)

    username: Optional[str] = Field(None, description=DESC_SNMP_USERNAME)
    auth_protocol: Optional[AuthProtocol] = None
    auth_password: Optional[str] = None
    priv_protocol: Optional[PrivProtocol] = None
    priv_password: Optional[str] = None
    security_engine_id: Optional[str] = None
    context_engine_id: Optional[str] = None
    context_name: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def address(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    @property
    def security_level(self) -> SecurityLevel:
        if self.auth_protocol is not None and self.priv_protocol is not None:
            return SecurityLevel.AUTH_PRIV
        if self.auth_protocol is not None:
            return SecurityLevel.AUTH_NO_PRIV
        return SecurityLevel.NO_AUTH_NO_PRIV
