import logging
from enum import Enum

from geofix.manager import LocationManager

logger = logging.getLogger(__name__)


class LifecycleEvent(Enum):
    DID_BECOME_ACTIVE = "did_become_active"
    DID_ENTER_BACKGROUND = "did_enter_background"


class LifecycleBridge:
    """Starts and stops location updates on application lifecycle events."""

    def __init__(self, manager: LocationManager):
        self.manager = manager

    def handle(self, event: LifecycleEvent):
        match event:
            case LifecycleEvent.DID_BECOME_ACTIVE:
                self.application_did_become_active()
            case LifecycleEvent.DID_ENTER_BACKGROUND:
                self.application_did_enter_background()
            case _:
                raise ValueError(f"Unknown lifecycle event: {event}")

    def application_did_become_active(self):
        logger.info("Application did become active")

        enabled = self.manager.adapter.location_services_enabled()
        if enabled != self.manager.is_location_service_enabled:
            self.manager.set_location_service_enabled(enabled)

        if self.manager.options.update_location_on_application_did_become_active:
            self.manager.start_updating_location()

    def application_did_enter_background(self):
        logger.info("Application did enter background")
        self.manager.stop_updating_location()
