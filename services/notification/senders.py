"""
Trap sender dispatching the traps generated for an alert bucket to every configured SNMP destination. Traps are built before any network I/O so that an invalid bucket never produces partial traps. Destinations are processed concurrently and independently: each one gets its own session, a failed trap does not stop the remaining traps, and a failed destination does not stop the others. Every attempted trap is recorded as a success or a failure for its destination, and the caller gets a single aggregated error once all destinations have been attempted.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from models.alerting.alerts import AlertBucket
from models.snmp.destinations import AuthProtocol, DestinationProfile, PrivProtocol, SNMPVersion
from models.snmp.traps import TrapPDU
from services.alerting.errors import TrapDispatchError
from services.notification import transport
from services.notification.trap_builder import TrapBuilder
from services.telemetry import OUTCOME_FAILURE, OUTCOME_SUCCESS, TelemetrySink

logger = logging.getLogger(__name__)


@dataclass
class DestinationResult:
    destination: str
    sent: int = 0
    failed: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failed == 0 and self.error is None


class TrapSender:

    def __init__(
        self,
        destinations: Sequence[DestinationProfile],
        builder: TrapBuilder,
        telemetry: TelemetrySink,
    ) -> None:
        self.destinations = list(destinations)
        self.builder = builder
        self.telemetry = telemetry

    async def send_alert_traps(self, alert_bucket: AlertBucket) -> List[DestinationResult]:
        traps = self.builder.build_traps(alert_bucket)
        if not traps:
            logger.info("No trap to send")
            return [DestinationResult(destination=profile.address) for profile in self.destinations]

        results = await asyncio.gather(*(self.send_traps(profile, traps) for profile in self.destinations))
        failed = [result for result in results if not result.ok]
        if failed:
            raise TrapDispatchError(
                f"error while sending one or more traps to {', '.join(r.destination for r in failed)}",
                results=list(results),
            )
        return list(results)

    async def send_traps(self, profile: DestinationProfile, traps: List[TrapPDU]) -> DestinationResult:
        result = DestinationResult(destination=profile.address)
        try:
            session = await transport.open_session(profile)
        except Exception as exc:
            logger.error("Error while opening SNMP connection to %s: %s", profile.address, exc)
            self.telemetry.record_trap_outcome(profile.address, OUTCOME_FAILURE, len(traps))
            result.failed = len(traps)
            result.error = str(exc)
            return result

        try:
            for trap in traps:
                try:
                    await session.send_trap(trap)
                except Exception as exc:
                    logger.warning("Error while sending trap %s to %s: %s", trap.trap_id, profile.address, exc)
                    self.telemetry.record_trap_outcome(profile.address, OUTCOME_FAILURE)
                    result.failed += 1
                    continue
                self.telemetry.record_trap_outcome(profile.address, OUTCOME_SUCCESS)
                result.sent += 1
        finally:
            session.close()

        logger.info("Sent %d/%d traps to %s", result.sent, len(traps), profile.address)
        return result


def build_destination_profiles(config) -> List[DestinationProfile]:
    version = SNMPVersion(config.SNMP_VERSION)
    profiles = []
    for host, port in config.SNMP_DESTINATIONS:
        kwargs = {
            "host": host,
            "port": port,
            "retries": config.SNMP_RETRIES,
            "timeout": config.SNMP_TIMEOUT,
            "version": version,
        }
        if version == SNMPVersion.V2C:
            kwargs["community"] = config.SNMP_COMMUNITY
        else:
            kwargs["username"] = config.SNMP_AUTH_USERNAME
            if config.SNMP_AUTH_ENABLED:
                kwargs["auth_protocol"] = AuthProtocol(config.SNMP_AUTH_PROTOCOL)
                kwargs["auth_password"] = config.SNMP_AUTH_PASSWORD
            if config.SNMP_PRIV_ENABLED:
                kwargs["priv_protocol"] = PrivProtocol(config.SNMP_PRIV_PROTOCOL)
                kwargs["priv_password"] = config.SNMP_PRIV_PASSWORD
            kwargs["security_engine_id"] = config.SNMP_SECURITY_ENGINE_ID
            kwargs["context_engine_id"] = config.SNMP_CONTEXT_ENGINE_ID
            kwargs["context_name"] = config.SNMP_CONTEXT_NAME
        profiles.append(DestinationProfile(**kwargs))
    return profiles
