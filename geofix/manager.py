import logging
import time
from typing import Callable

from geofix.exceptions import ErrorKind, LocationError
from geofix.models import AcquisitionState, Sample
from geofix.observer import (
    DID_FAIL,
    DID_STOP,
    DID_UPDATE,
    ENABLED_CHANGED,
    WILL_UPDATE,
)
from geofix.options import LocationOptions
from geofix.provider import LocationProvider, ProviderAdapter
from geofix.registry import ObserverRegistry
from geofix.timer import Timer

logger = logging.getLogger(__name__)


class LocationManager:
    """
    Drives one location acquisition session on behalf of many observers.

    A session starts with ``start_updating_location``. Samples reported by the
    provider are filtered by age and accuracy. A sample meeting the desired
    accuracy ends the session; until then the most accurate sample is kept.
    The querying timer bounds a session, the loop timer optionally starts the
    next one.

    Args:
        provider (LocationProvider): The capability delivering samples.
        options (LocationOptions): Tunables, defaults when omitted.
        loop: Event loop used by the timers, the running loop when omitted.
        clock (Callable[[], float]): Wall clock used to age samples.
    """

    def __init__(
        self,
        provider: LocationProvider,
        options: LocationOptions | None = None,
        *,
        loop=None,
        clock: Callable[[], float] | None = None,
    ):
        self.options = options if options is not None else LocationOptions()
        self._clock = clock or time.time
        self._observers = ObserverRegistry()
        self._adapter = ProviderAdapter(provider, self._on_sample, self._on_error)
        self._adapter.desired_accuracy = self.options.desired_accuracy

        self._location: Sample | None = None
        self._location_service_enabled = self._adapter.location_services_enabled()

        self._querying_timer = Timer("querying", self._querying_timer_passed, loop)
        self._loop_timer = Timer("loop", self._loop_timer_passed, loop)

    @property
    def provider(self) -> LocationProvider:
        return self._adapter.provider

    @property
    def adapter(self) -> ProviderAdapter:
        return self._adapter

    @property
    def location(self) -> Sample | None:
        """Best sample so far, ``None`` if none was determined yet."""
        return self._location

    @property
    def desired_accuracy(self) -> float:
        """Accuracy requested from the provider.

        Changing ``options.desired_accuracy`` directly reaches the provider on
        the next start, assigning this property forwards it immediately.
        """
        return self._adapter.desired_accuracy

    @desired_accuracy.setter
    def desired_accuracy(self, accuracy: float):
        self.options.desired_accuracy = accuracy
        self._adapter.desired_accuracy = accuracy

    @property
    def is_querying(self) -> bool:
        return self._querying_timer.armed

    @property
    def is_location_service_enabled(self) -> bool:
        return self._location_service_enabled

    @property
    def state(self) -> AcquisitionState:
        if self._querying_timer.armed:
            return AcquisitionState.QUERYING
        if self._loop_timer.armed:
            return AcquisitionState.STOPPED_LOOPING
        return AcquisitionState.IDLE

    # Observers ----------------------------------------------------------
    def add_observer(self, observer):
        self._observers.add(observer)

    def remove_observer(self, observer):
        self._observers.remove(observer)

    @property
    def observers(self) -> ObserverRegistry:
        return self._observers

    def set_location_service_enabled(self, enabled: bool) -> bool:
        """Record the permission state, notify observers if it changed."""
        if enabled == self._location_service_enabled:
            return False

        self._location_service_enabled = enabled
        logger.warning(f"Location service {'enabled' if enabled else 'disabled'}")
        self._observers.notify(ENABLED_CHANGED, enabled)
        return True

    # Session control ----------------------------------------------------
    def start_updating_location(self):
        self._loop_timer.disarm()
        self._querying_timer.arm(self.options.querying_interval)

        logger.info("Start updating location")
        self._observers.notify(WILL_UPDATE)

        # An observer may have stopped the session while being notified
        if not self.is_querying:
            return

        self._adapter.desired_accuracy = self.options.desired_accuracy
        self._adapter.start_acquisition()

    def stop_updating_location(self):
        self._adapter.stop_acquisition()

        self._querying_timer.disarm()
        self._loop_timer.disarm()

        logger.info("Stop updating location")
        self._observers.notify(DID_STOP)

    def close(self):
        if self.state is not AcquisitionState.IDLE:
            self.stop_updating_location()
        self._observers.clear()

    # Provider events ----------------------------------------------------
    def _on_sample(self, sample: Sample):
        if not self.is_querying:
            logger.debug(f"Ignoring sample while not querying: {sample}")
            return

        if not self.options.use_cache:
            age = sample.age(self._clock())
            if age > self.options.cache_age:
                logger.debug(
                    f"Discarding {ErrorKind.STALE_SAMPLE}: {sample} is {age:.1f}s old"
                )
                return

        if sample.accuracy <= self.options.desired_accuracy:
            self._location = sample
            self._did_update_location(sample)
        elif sample.is_better_than(self._location):
            self._location = sample
            logger.debug(f"Improved location: {sample}")
        else:
            logger.debug(f"Discarding less accurate location: {sample}")

    def _on_error(self, error: LocationError):
        if not self.is_querying:
            logger.debug(f"Ignoring provider error while not querying: {error}")
            return

        logger.error(f"Location provider failed ({error.kind}): {error}")

        if error.kind is ErrorKind.PERMISSION_DENIED:
            self.set_location_service_enabled(False)

        self.stop_updating_location()
        self._observers.notify(DID_FAIL, error)

    def _did_update_location(self, sample: Sample):
        self.stop_updating_location()

        logger.info(f"Location updated: {sample}")
        # No chain of earlier fixes is kept, the previous location is unknown
        self._observers.notify(DID_UPDATE, sample, None)

        # Skip the pause when an observer already restarted the session
        if self.options.loop and not self.is_querying:
            self._loop_timer.arm(self.options.loop_time_interval)

    # Timers -------------------------------------------------------------
    def _querying_timer_passed(self):
        logger.info(
            f"No location within {self.options.querying_interval}s "
            f"({ErrorKind.DEADLINE_EXCEEDED})"
        )
        self.stop_updating_location()

        location = self._location
        if location is not None:
            self._observers.notify(DID_UPDATE, location, None)
        else:
            self._observers.notify(DID_FAIL, None)

    def _loop_timer_passed(self):
        self._loop_timer.disarm()
        self.start_updating_location()


_shared_manager: LocationManager | None = None


def shared_location_manager(
    provider: LocationProvider | None = None, **kwargs
) -> LocationManager:
    """
    Return the process-wide location manager.

    The first call constructs it and must supply the provider; keyword
    arguments are passed to ``LocationManager``. Later calls return the same
    instance and ignore their arguments.
    """
    global _shared_manager

    if _shared_manager is None:
        if provider is None:
            raise RuntimeError("The shared location manager requires a provider")
        _shared_manager = LocationManager(provider, **kwargs)
    elif provider is not None and provider is not _shared_manager.provider:
        logger.warning("Shared location manager already exists, ignoring provider")

    return _shared_manager


def reset_shared_location_manager():
    """Stop and drop the process-wide location manager."""
    global _shared_manager

    if _shared_manager is not None:
        _shared_manager.close()
    _shared_manager = None
