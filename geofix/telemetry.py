import asyncio
import logging
import math
from uuid import UUID

import httpx

from geofix.exceptions import LocationError
from geofix.manager import LocationManager
from geofix.models import Sample
from geofix.timer import Timer

logger = logging.getLogger(__name__)


class LogObserver:
    """Writes every location notification to the log."""

    def on_location_service_enabled_changed(self, enabled: bool):
        logger.info(f"Location service enabled: {enabled}")

    def on_will_update_location(self):
        logger.debug("Will update location")

    def on_did_stop_update_location(self):
        logger.debug("Did stop updating location")

    def on_did_update_location(self, new_sample: Sample, previous_sample: Sample | None):
        logger.info(f"{new_sample}")

    def on_did_fail_with_error(self, error: LocationError | None):
        if error is None:
            logger.warning("No location determined")
        else:
            logger.warning(f"Location failed: {error}")


class TelemetryObserver:
    """Forwards accepted locations to the management endpoint."""

    def __init__(
        self,
        base_url: str,
        auth_token: str,
        instance_id: UUID | str,
        client: httpx.AsyncClient | None = None,
    ):
        headers = {
            "Authorization": "Basic " + auth_token,
            "User-Agent": "geofix-agent/1.0",
            "X-Instance-ID": str(instance_id),
        }

        if client is None:
            client = httpx.AsyncClient(base_url=base_url, headers=headers)
        else:
            client.headers.update(headers)
        self._client = client
        self._tasks: set[asyncio.Task] = set()

    @staticmethod
    def payload(sample: Sample) -> dict:
        data = sample.as_dict()
        # JSON has no infinity
        if math.isinf(sample.accuracy):
            data["accuracy"] = None
        return data

    def on_did_update_location(self, new_sample: Sample, previous_sample: Sample | None):
        task = asyncio.get_running_loop().create_task(self.notify(new_sample))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def notify(self, sample: Sample):
        try:
            response = await self._client.post("/location", json=self.payload(sample))
            response.raise_for_status()
        except (
            httpx.HTTPStatusError,
            httpx.ConnectTimeout,
            httpx.ConnectError,
        ) as e:
            logger.error(f"HTTP Error: {e}")
        except httpx.HTTPError as e:
            logger.error(f"Unknown error: {e}")

    async def aclose(self):
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        await self._client.aclose()


class RetryObserver:
    """Restarts acquisition after a failed attempt while looping is enabled.

    The loop timer only follows a successful fix, so without this a daemon
    whose provider is down at boot stays idle.
    """

    def __init__(self, manager: LocationManager, loop=None):
        self.manager = manager
        self._timer = Timer("retry", self._retry, loop)

    @property
    def pending(self) -> bool:
        return self._timer.armed

    def on_will_update_location(self):
        self._timer.disarm()

    def on_did_stop_update_location(self):
        self._timer.disarm()

    def on_did_fail_with_error(self, error: LocationError | None):
        if not self.manager.options.loop:
            return

        interval = self.manager.options.loop_time_interval
        logger.info(f"Retrying location in {interval}s")
        self._timer.arm(interval)

    def close(self):
        self._timer.disarm()

    def _retry(self):
        self.manager.start_updating_location()
