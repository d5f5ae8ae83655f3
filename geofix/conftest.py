import pytest

from geofix.manager import LocationManager, reset_shared_location_manager
from geofix.models import Sample
from geofix.options import LocationOptions


class FakeHandle:
    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeLoop:
    """Manual clock standing in for the asyncio loop's ``call_later``."""

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def time(self):
        return self.now

    def call_later(self, delay, callback):
        handle = FakeHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.handles.remove(handle)
            self.now = handle.when
            handle.callback()
        self.now = target


class FakeProvider:
    def __init__(self, enabled=True):
        self.delegate = None
        self.desired_accuracy = None
        self.enabled = enabled
        self.running = False
        self.starts = 0
        self.stops = 0
        self.start_error = None

    def start(self):
        self.starts += 1
        if self.start_error is not None:
            raise self.start_error
        self.running = True

    def stop(self):
        self.stops += 1
        self.running = False

    def location_services_enabled(self):
        return self.enabled

    def deliver(self, sample):
        if self.delegate is not None:
            self.delegate.provider_did_update(sample)

    def fail(self, exc):
        if self.delegate is not None:
            self.delegate.provider_did_fail(exc)


class RecordingObserver:
    def __init__(self):
        self.events = []

    def on_location_service_enabled_changed(self, enabled):
        self.events.append(("enabled_changed", enabled))

    def on_will_update_location(self):
        self.events.append(("will_update",))

    def on_did_stop_update_location(self):
        self.events.append(("did_stop",))

    def on_did_update_location(self, new_sample, previous_sample):
        self.events.append(("did_update", new_sample, previous_sample))

    def on_did_fail_with_error(self, error):
        self.events.append(("did_fail", error))

    def names(self):
        return [event[0] for event in self.events]


@pytest.fixture
def loop():
    return FakeLoop()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def options():
    return LocationOptions(desired_accuracy=5.0, querying_interval=10.0)


@pytest.fixture
def manager(provider, options, loop):
    manager = LocationManager(provider, options, loop=loop, clock=lambda: 1000.0 + loop.now)
    yield manager
    manager.close()


@pytest.fixture
def observer(manager):
    observer = RecordingObserver()
    manager.add_observer(observer)
    return observer


@pytest.fixture(autouse=True)
def shared_manager_reset():
    yield
    reset_shared_location_manager()


def sample(accuracy, timestamp=1000.0, latitude=52.0, longitude=4.0):
    return Sample(
        latitude=latitude,
        longitude=longitude,
        accuracy=accuracy,
        timestamp=timestamp,
    )
