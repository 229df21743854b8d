"""
SNMP transport utilities for the trap sender, providing the mapping from a destination profile to pysnmp security and context data, and a session object that owns one SNMP engine and one UDP transport target per destination. Sends are single attempts at this level: the only retries are the ones the SNMP engine performs according to the destination retry count and timeout.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Any

from pysnmp.hlapi.v3arch.asyncio import (
    CommunityData,
    ContextData,
    ObjectIdentity,
    ObjectType,
    SnmpEngine,
    Udp6TransportTarget,
    UdpTransportTarget,
    UsmUserData,
    send_notification,
    usmAesCfb128Protocol,
    usmDESPrivProtocol,
    usmHMACMD5AuthProtocol,
    usmHMACSHAAuthProtocol,
)
from pysnmp.proto import rfc1902

from models.snmp.destinations import AuthProtocol, DestinationProfile, PrivProtocol, SNMPVersion
from models.snmp.traps import TrapPDU, VarBind, VarBindType

logger = logging.getLogger(__name__)

NOTIFY_TYPE_TRAP = "trap"

AUTH_PROTO_MAP = {
    AuthProtocol.MD5: usmHMACMD5AuthProtocol,
    AuthProtocol.SHA: usmHMACSHAAuthProtocol,
}

PRIV_PROTO_MAP = {
    PrivProtocol.DES: usmDESPrivProtocol,
    PrivProtocol.AES: usmAesCfb128Protocol,
}


class SNMPTransportError(Exception):
    pass


def _engine_id(value: str | None):
    if not value:
        return None
    return rfc1902.OctetString(hexValue=value.replace(":", "").strip())


def build_auth_data(profile: DestinationProfile):
    if profile.version == SNMPVersion.V2C:
        # mpModel=1 selects SNMPv2c
        return CommunityData(profile.community or "", mpModel=1)

    kwargs: dict[str, Any] = {"userName": profile.username or ""}
    if profile.auth_protocol is not None:
        kwargs["authProtocol"] = AUTH_PROTO_MAP[profile.auth_protocol]
        kwargs["authKey"] = profile.auth_password
    if profile.priv_protocol is not None:
        kwargs["privProtocol"] = PRIV_PROTO_MAP[profile.priv_protocol]
        kwargs["privKey"] = profile.priv_password
    return UsmUserData(**kwargs)


def build_engine(profile: DestinationProfile) -> SnmpEngine:
    # For traps the sender is the authoritative engine and owns the security engine ID
    security_engine_id = _engine_id(profile.security_engine_id)
    if profile.version == SNMPVersion.V3 and security_engine_id is not None:
        return SnmpEngine(snmpEngineID=security_engine_id)
    return SnmpEngine()


def build_context_data(profile: DestinationProfile) -> ContextData:
    if profile.version == SNMPVersion.V2C:
        return ContextData()
    return ContextData(
        contextEngineId=_engine_id(profile.context_engine_id),
        contextName=(profile.context_name or "").encode("utf-8"),
    )


def to_pysnmp_value(var_bind: VarBind):
    if var_bind.type == VarBindType.TIME_TICKS:
        return rfc1902.TimeTicks(int(var_bind.value))
    if var_bind.type == VarBindType.OBJECT_IDENTIFIER:
        return rfc1902.ObjectIdentifier(str(var_bind.value))
    return rfc1902.OctetString(str(var_bind.value).encode("utf-8"))


def to_pysnmp_var_binds(trap: TrapPDU) -> list[ObjectType]:
    return [ObjectType(ObjectIdentity(var_bind.oid), to_pysnmp_value(var_bind)) for var_bind in trap.var_binds]


class SNMPSession:
    """One SNMP engine and transport target bound to a single destination."""

    def __init__(self, profile: DestinationProfile) -> None:
        self.profile = profile
        self._auth_data = build_auth_data(profile)
        self._context_data = build_context_data(profile)
        self._engine: SnmpEngine | None = None
        self._target: UdpTransportTarget | Udp6TransportTarget | None = None

    @property
    def destination(self) -> str:
        return self.profile.address

    async def open(self) -> "SNMPSession":
        try:
            self._engine = build_engine(self.profile)
            target_class = Udp6TransportTarget if ":" in self.profile.host else UdpTransportTarget
            self._target = await target_class.create(
                (self.profile.host, self.profile.port),
                timeout=self.profile.timeout,
                retries=self.profile.retries,
            )
        except Exception as exc:
            self.close()
            raise SNMPTransportError(f"unable to open SNMP session to {self.destination}: {exc}") from exc
        logger.debug(
            "Opened SNMP %s session to %s (%s)",
            self.profile.version.value,
            self.destination,
            self.profile.security_level.value,
        )
        return self

    async def send_trap(self, trap: TrapPDU) -> None:
        if self._engine is None or self._target is None:
            raise SNMPTransportError(f"SNMP session to {self.destination} is not open")
        try:
            error_indication, error_status, error_index, _ = await send_notification(
                self._engine,
                self._auth_data,
                self._target,
                self._context_data,
                NOTIFY_TYPE_TRAP,
                *to_pysnmp_var_binds(trap),
            )
        except Exception as exc:
            raise SNMPTransportError(f"unable to send trap {trap.trap_id} to {self.destination}: {exc}") from exc
        if error_indication:
            raise SNMPTransportError(f"trap {trap.trap_id} to {self.destination} failed: {error_indication}")
        if error_status:
            raise SNMPTransportError(
                f"trap {trap.trap_id} to {self.destination} failed: {error_status.prettyPrint()} at {error_index}"
            )

    def close(self) -> None:
        engine, self._engine, self._target = self._engine, None, None
        if engine is None:
            return
        try:
            engine.close_dispatcher()
        except Exception as exc:
            logger.warning("Failed to close SNMP session to %s: %s", self.destination, exc)


async def open_session(profile: DestinationProfile) -> SNMPSession:
    return await SNMPSession(profile).open()
