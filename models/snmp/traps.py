"""
Module defines the variable bindings of an outgoing SNMP trap, kept independent from the SNMP library so trap content can be built and inspected without a network engine.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import List, Union
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum

SYS_UPTIME_OID = "1.3.6.1.2.1.1.3.0"
SNMP_TRAP_OID = "1.3.6.1.6.3.1.1.4.1.0"


class VarBindType(str, Enum):
    TIME_TICKS = "TimeTicks"
    OBJECT_IDENTIFIER = "ObjectIdentifier"
    OCTET_STRING = "OctetString"


class VarBind(BaseModel):
    oid: str
    type: VarBindType
    value: Union[int, str]

    model_config = ConfigDict(frozen=True)


class TrapPDU(BaseModel):
    trap_id: str = Field(..., description="Unique identifier of the trap, OID and group")
    var_binds: List[VarBind] = Field(default_factory=list)

    def value_of(self, oid: str) -> Union[int, str, None]:
        for var_bind in self.var_binds:
            if var_bind.oid == oid:
                return var_bind.value
        return None
