"""
Service relaying Alertmanager payloads as SNMP traps. It owns one alert parser, one template renderer, one trap builder and one trap sender, all configured once from the application configuration, and exposes a single relay operation used by the webhook router.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Optional

from models.alerting.alerts import AlertsData
from services.alerting.errors import TrapDispatchError
from services.alerting.alert_parser import AlertParser, AlertParserConfiguration
from services.notification.senders import TrapSender, build_destination_profiles
from services.notification.templates import (
    DEFAULT_DESCRIPTION_TEMPLATE,
    DESCRIPTION_TEMPLATE_NAME,
    TemplateRenderer,
)
from services.notification.trap_builder import TrapBuilder, TrapBuilderConfiguration, user_object_template_name
from services.telemetry import PrometheusTelemetry

logger = logging.getLogger(__name__)


def build_renderer(config) -> TemplateRenderer:
    renderer = TemplateRenderer()
    if config.TRAP_DESCRIPTION_TEMPLATE:
        renderer.register_file(DESCRIPTION_TEMPLATE_NAME, config.TRAP_DESCRIPTION_TEMPLATE)
    else:
        renderer.register(DESCRIPTION_TEMPLATE_NAME, DEFAULT_DESCRIPTION_TEMPLATE)
    for sub_oid, template_path in config.TRAP_USER_OBJECTS.items():
        renderer.register_file(user_object_template_name(sub_oid), template_path)
    return renderer


class TrapRelayService:

    def __init__(
        self,
        parser: AlertParser,
        sender: TrapSender,
        telemetry: PrometheusTelemetry,
    ) -> None:
        self.parser = parser
        self.sender = sender
        self.telemetry = telemetry

    @classmethod
    def from_config(cls, config, telemetry: Optional[PrometheusTelemetry] = None) -> "TrapRelayService":
        telemetry = telemetry or PrometheusTelemetry()
        parser_configuration = AlertParserConfiguration.from_config(config)
        parser = AlertParser(parser_configuration)
        builder = TrapBuilder(TrapBuilderConfiguration.from_config(config), build_renderer(config))
        destinations = build_destination_profiles(config)
        sender = TrapSender(destinations, builder, telemetry)
        logger.info(
            "Relaying traps over SNMP %s to %s (resolution OIDs %s)",
            config.SNMP_VERSION,
            ", ".join(profile.address for profile in destinations),
            "enabled" if parser_configuration.splits_resolution else "disabled",
        )
        return cls(parser, sender, telemetry)

    async def relay(self, alerts_data: AlertsData) -> int:
        """Parse the payload into alert groups and send one trap per group to every destination.

        Returns the number of traps generated per destination. Validation errors are raised
        before any SNMP session is opened; a TrapDispatchError is raised once every destination
        has been attempted if any trap could not be delivered.
        """
        try:
            alert_bucket = self.parser.parse(alerts_data)
            logger.debug(
                "Parsed %d alerts from receiver %s into %d groups",
                len(alerts_data.alerts),
                alerts_data.receiver,
                len(alert_bucket),
            )
            await self.sender.send_alert_traps(alert_bucket)
        except (ValueError, TrapDispatchError) as exc:
            logger.error("Unable to relay alerts %s: %s", alerts_data.model_dump_json(by_alias=True), exc)
            raise
        return len(alert_bucket)
