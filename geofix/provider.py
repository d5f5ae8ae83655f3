import logging
from typing import Any, Callable, Protocol

from geofix.exceptions import (
    LocationError,
    LocationPermissionDenied,
    LocationProviderError,
)
from geofix.models import Sample

logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    """The capability that actually determines coordinates.

    A provider delivers samples and errors asynchronously to exactly one
    ``delegate`` at a time, through ``provider_did_update(sample)`` and
    ``provider_did_fail(exc)``.
    """

    delegate: Any
    desired_accuracy: float

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def location_services_enabled(self) -> bool: ...


def translate_error(exc: BaseException) -> LocationError:
    if isinstance(exc, LocationError):
        return exc
    if isinstance(exc, PermissionError):
        error = LocationPermissionDenied(str(exc) or "location access denied")
    else:
        error = LocationProviderError(str(exc) or type(exc).__name__)
    error.__cause__ = exc
    return error


class ProviderAdapter:
    """Holds the provider's single subscription slot on behalf of the manager."""

    def __init__(
        self,
        provider: LocationProvider,
        on_sample: Callable[[Sample], None],
        on_error: Callable[[LocationError], None],
    ):
        self.provider = provider
        self._on_sample = on_sample
        self._on_error = on_error

    @property
    def subscribed(self) -> bool:
        return self.provider.delegate is self

    @property
    def desired_accuracy(self) -> float:
        return self.provider.desired_accuracy

    @desired_accuracy.setter
    def desired_accuracy(self, accuracy: float):
        self.provider.desired_accuracy = accuracy

    def location_services_enabled(self) -> bool:
        return bool(self.provider.location_services_enabled())

    def start_acquisition(self):
        self.provider.delegate = self
        try:
            self.provider.start()
        except Exception as e:
            logger.error(f"Location provider failed to start: {e}")
            self.provider_did_fail(e)

    def stop_acquisition(self):
        try:
            self.provider.stop()
        except Exception as e:
            logger.error(f"Location provider failed to stop: {e}")
        finally:
            if self.subscribed:
                self.provider.delegate = None

    # Provider delegate --------------------------------------------------
    def provider_did_update(self, sample: Sample):
        if not self.subscribed:
            logger.debug(f"Dropping sample from unsubscribed provider: {sample}")
            return
        self._on_sample(sample)

    def provider_did_fail(self, exc: BaseException):
        if not self.subscribed:
            logger.debug(f"Dropping error from unsubscribed provider: {exc}")
            return
        self._on_error(translate_error(exc))
