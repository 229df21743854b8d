"""
Alertmanager webhook endpoint relaying the received alerts as SNMP traps to the configured destinations.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging

from fastapi import APIRouter, Body

from config import config, constants
from middleware.error_handlers import handle_route_errors
from models.alerting.alerts import AlertsData
from services.trap_relay_service import TrapRelayService

logger = logging.getLogger(__name__)

webhook_router = APIRouter(tags=["alertmanager-webhooks"])

relay_service = TrapRelayService.from_config(config)


@webhook_router.post("/alerts")
@handle_route_errors()
async def alert_webhook(
    payload: AlertsData = Body(...),
) -> dict:
    logger.info("Received webhook payload with %d alerts from %s", len(payload.alerts), payload.receiver)
    traps = await relay_service.relay(payload)
    return {"status": constants.STATUS_SUCCESS, "traps": traps}
