from typing import Protocol

from geofix.exceptions import LocationError
from geofix.models import Sample


class LocationObserver(Protocol):
    """Notifications sent by the location manager.

    Every method is optional. Observers implement the subset they care about
    and the manager skips the rest.
    """

    def on_location_service_enabled_changed(self, enabled: bool) -> None:  # pragma: no cover - optional
        """The location capability was permitted or revoked."""

    def on_will_update_location(self) -> None:  # pragma: no cover - optional
        """An acquisition attempt is beginning."""

    def on_did_stop_update_location(self) -> None:  # pragma: no cover - optional
        """The acquisition attempt has fully stopped."""

    def on_did_update_location(
        self, new_sample: Sample, previous_sample: Sample | None
    ) -> None:  # pragma: no cover - optional
        """A final sample was accepted."""

    def on_did_fail_with_error(self, error: LocationError | None) -> None:  # pragma: no cover - optional
        """Acquisition ended without a usable sample.

        ``error`` is ``None`` when the deadline passed without any sample.
        """


WILL_UPDATE = "on_will_update_location"
DID_STOP = "on_did_stop_update_location"
DID_UPDATE = "on_did_update_location"
DID_FAIL = "on_did_fail_with_error"
ENABLED_CHANGED = "on_location_service_enabled_changed"
