from geofix.exceptions import (
    ErrorKind,
    LocationError,
    LocationPermissionDenied,
    LocationProviderError,
)
from geofix.lifecycle import LifecycleBridge, LifecycleEvent
from geofix.manager import (
    LocationManager,
    reset_shared_location_manager,
    shared_location_manager,
)
from geofix.models import AcquisitionState, Sample
from geofix.observer import LocationObserver
from geofix.options import LocationOptions
from geofix.provider import LocationProvider, ProviderAdapter

__all__ = [
    "AcquisitionState",
    "ErrorKind",
    "LifecycleBridge",
    "LifecycleEvent",
    "LocationError",
    "LocationManager",
    "LocationObserver",
    "LocationOptions",
    "LocationPermissionDenied",
    "LocationProvider",
    "LocationProviderError",
    "ProviderAdapter",
    "Sample",
    "reset_shared_location_manager",
    "shared_location_manager",
]
