"""
Trap content builder turning each alert group of a bucket into the ordered variable bindings of one SNMPv2 trap: system uptime, trap OID, the unique trap identifier, the severity, the rendered description, and the user-defined objects.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from models.alerting.alerts import AlertBucket, AlertGroup
from models.snmp.traps import SNMP_TRAP_OID, SYS_UPTIME_OID, TrapPDU, VarBind, VarBindType
from services.alerting.oids import join_oid, require_oid
from services.notification.templates import DESCRIPTION_TEMPLATE_NAME, TemplateRenderer

logger = logging.getLogger(__name__)

TRAP_ID_SUB_OID = 1
SEVERITY_SUB_OID = 2
DESCRIPTION_SUB_OID = 3
MINIMUM_USER_OBJECT_SUB_OID = 4

MAX_TIME_TICKS = 2**32 - 1


@dataclass(frozen=True)
class UserObject:
    sub_oid: int
    template_name: str


def user_object_template_name(sub_oid: int) -> str:
    return f"user-object-{sub_oid}"


def validate_user_objects(user_objects: List[UserObject]) -> List[UserObject]:
    seen = set()
    for user_object in user_objects:
        if user_object.sub_oid < MINIMUM_USER_OBJECT_SUB_OID:
            raise ValueError(
                f"invalid object ID: {user_object.sub_oid}. Object ID must be a number greater or equal to {MINIMUM_USER_OBJECT_SUB_OID}"
            )
        if user_object.sub_oid in seen:
            raise ValueError(f"invalid object ID: {user_object.sub_oid} defined twice")
        seen.add(user_object.sub_oid)
    return sorted(user_objects, key=lambda obj: obj.sub_oid)


@dataclass(frozen=True)
class TrapBuilderConfiguration:
    default_objects_base_oid: Optional[str] = "1.3.6.1.4.1.98789.2"
    user_objects_base_oid: Optional[str] = None
    user_objects: List[UserObject] = field(default_factory=list)
    engine_start_time: Optional[float] = None

    @classmethod
    def from_config(cls, config) -> "TrapBuilderConfiguration":
        return cls(
            default_objects_base_oid=config.TRAP_DEFAULT_OBJECTS_BASE_OID,
            user_objects_base_oid=config.TRAP_USER_OBJECTS_BASE_OID,
            user_objects=[
                UserObject(sub_oid=sub_oid, template_name=user_object_template_name(sub_oid))
                for sub_oid in config.TRAP_USER_OBJECTS
            ],
            engine_start_time=config.SNMP_ENGINE_START_TIME,
        )


def host_boot_time() -> float:
    return time.time() - time.monotonic()


class TrapBuilder:

    def __init__(
        self,
        configuration: TrapBuilderConfiguration,
        renderer: TemplateRenderer,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.configuration = configuration
        self.renderer = renderer
        self._clock = clock
        self._user_objects = validate_user_objects(list(configuration.user_objects))
        if configuration.default_objects_base_oid is not None:
            require_oid(configuration.default_objects_base_oid)
        if configuration.user_objects_base_oid is not None:
            require_oid(configuration.user_objects_base_oid)
        self._engine_start_time = (
            configuration.engine_start_time if configuration.engine_start_time is not None else host_boot_time()
        )

    def uptime_ticks(self) -> int:
        """Hundredths of a second since the engine start time, as carried by sysUpTime."""
        ticks = int(max(0.0, self._clock() - self._engine_start_time) * 100)
        return ticks if ticks <= MAX_TIME_TICKS else 0

    def build_traps(self, alert_bucket: AlertBucket) -> List[TrapPDU]:
        return [self.build_trap(alert_group) for alert_group in alert_bucket.alert_groups.values()]

    def object_base_oids(self, alert_group: AlertGroup) -> Tuple[str, str, str]:
        """Return the trap OID, the default objects base OID and the user objects base OID."""
        default_base = self.configuration.default_objects_base_oid
        if default_base is None:
            legacy_base = join_oid(alert_group.oid, 2)
            return join_oid(alert_group.oid, 1), legacy_base, legacy_base
        return alert_group.oid, default_base, self.configuration.user_objects_base_oid or default_base

    def build_trap(self, alert_group: AlertGroup) -> TrapPDU:
        context = alert_group.template_context()
        description = self.renderer.render(DESCRIPTION_TEMPLATE_NAME, context)
        trap_oid, default_base, user_base = self.object_base_oids(alert_group)

        var_binds = [
            VarBind(oid=SYS_UPTIME_OID, type=VarBindType.TIME_TICKS, value=self.uptime_ticks()),
            VarBind(oid=SNMP_TRAP_OID, type=VarBindType.OBJECT_IDENTIFIER, value=trap_oid),
            _sub_object(default_base, TRAP_ID_SUB_OID, alert_group.trap_id),
            _sub_object(default_base, SEVERITY_SUB_OID, alert_group.severity),
            _sub_object(default_base, DESCRIPTION_SUB_OID, description),
        ]
        for user_object in self._user_objects:
            value = self.renderer.render(user_object.template_name, context)
            var_binds.append(_sub_object(user_base, user_object.sub_oid, value))

        logger.debug("Built trap %s with %d var binds", alert_group.trap_id, len(var_binds))
        return TrapPDU(trap_id=alert_group.trap_id, var_binds=var_binds)


def _sub_object(base_oid: str, sub_oid: int, value: str) -> VarBind:
    return VarBind(oid=join_oid(base_oid, sub_oid), type=VarBindType.OCTET_STRING, value=value.strip())
