"""
Error types raised while turning alerts into SNMP traps. Validation errors derive from ValueError so route handlers report them as client errors, while dispatch errors signal an upstream delivery failure.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List, Optional


class AlertRelayError(Exception):
    pass


class MalformedOIDError(AlertRelayError, ValueError):
    def __init__(self, oid: str) -> None:
        super().__init__(f'invalid OID provided: "{oid}"')
        self.oid = oid


class UnrankedSeverityError(AlertRelayError, ValueError):
    def __init__(self, severity: str) -> None:
        super().__init__(f"incorrect severity: {severity}")
        self.severity = severity


class TemplateRenderError(AlertRelayError, ValueError):
    def __init__(self, template_name: str, reason: str) -> None:
        super().__init__(f"unable to render template {template_name}: {reason}")
        self.template_name = template_name
        self.reason = reason


class TrapDispatchError(AlertRelayError):
    def __init__(self, message: str = "error while sending one or more traps", results: Optional[List] = None) -> None:
        super().__init__(message)
        self.results = results or []

    @property
    def failed_destinations(self) -> List[str]:
        return [result.destination for result in self.results if not result.ok]
