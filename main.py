"""
Entrypoint for the SNMP notifier, relaying Alertmanager webhooks as SNMP traps.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging

import uvloop
from fastapi import FastAPI, Response
from fastapi.exceptions import RequestValidationError

from config import config, constants
from middleware.error_handlers import general_exception_handler, validation_exception_handler
from middleware.metrics import RequestMetricsMiddleware
from routers.notifier import alerts_webhook_router, relay_service

asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("snmp_notifier")

app = FastAPI(
    title="SNMP Notifier",
    description="Relays Alertmanager notifications as SNMP traps",
    version="1.0.0",
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)
app.add_middleware(RequestMetricsMiddleware, telemetry=relay_service.telemetry)

app.include_router(alerts_webhook_router)


@app.get("/health")
async def health() -> dict:
    return {"status": constants.STATUS_HEALTHY, "service": constants.SERVICE_NAME}


@app.get("/metrics")
async def metrics() -> Response:
    payload, content_type = relay_service.telemetry.get_metrics()
    return Response(content=payload, media_type=content_type)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT, loop="uvloop", log_level=config.LOG_LEVEL)
