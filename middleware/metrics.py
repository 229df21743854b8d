"""
Request metrics middleware recording the status code of every alert webhook request.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Iterable

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from services.telemetry import TelemetrySink

logger = logging.getLogger(__name__)


class RequestMetricsMiddleware:

    def __init__(self, app: ASGIApp, telemetry: TelemetrySink, paths: Iterable[str] = ("/alerts",)) -> None:
        self.app = app
        self.telemetry = telemetry
        self.paths = set(paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http" or scope.get("path") not in self.paths:
            await self.app(scope, receive, send)
            return

        status_code = 500

        async def tracking_send(message: Message) -> None:
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = int(message["status"])
            await send(message)

        try:
            await self.app(scope, receive, tracking_send)
        finally:
            self.telemetry.record_request(status_code)
