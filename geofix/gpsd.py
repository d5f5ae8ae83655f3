import asyncio
import logging
import math
import time
import traceback
from typing import Callable

from gps import client as gps_client
from gps.schemas import TPV

from geofix.models import Sample

logger = logging.getLogger(__name__)


def sample_from_tpv(tpv: TPV, received_at: float) -> Sample | None:
    """Convert a gpsd TPV report into a sample, ``None`` without a fix."""
    if not tpv.has_fix:
        return None

    accuracy = tpv.horizontal_error
    altitude = tpv.altMSL if tpv.altMSL is not None else tpv.alt

    return Sample(
        latitude=tpv.lat,
        longitude=tpv.lon,
        accuracy=accuracy if accuracy is not None else math.inf,
        timestamp=tpv.time.timestamp() if tpv.time is not None else received_at,
        altitude=altitude,
        speed=tpv.speed,
        heading=tpv.track,
    )


class GpsdProvider:
    """Location provider reading fixes from a gpsd daemon."""

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 2947,
        *,
        open_client: Callable | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.host = host
        self.port = port
        self.delegate = None
        # gpsd has no notion of a requested accuracy, kept for the protocol
        self.desired_accuracy = -1.0

        self._open = open_client or gps_client.open
        self._clock = clock or time.time
        self._task: asyncio.Task | None = None
        self._enabled = True

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def location_services_enabled(self) -> bool:
        return self._enabled

    def start(self):
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self):
        logger.info(f"Connecting to gpsd at {self.host}:{self.port}")

        try:
            async with await self._open(self.host, self.port) as c:
                self._enabled = True
                logger.info(f"gpsd connected at {self.host}:{self.port}")

                async for report in c:
                    if not isinstance(report, TPV):
                        continue

                    sample = sample_from_tpv(report, self._clock())
                    if sample is None:
                        logger.debug(f"No fix in report (mode {report.mode})")
                        continue
                    self._deliver(sample)

        except asyncio.CancelledError:
            logger.debug("gpsd reader cancelled")
            raise
        except PermissionError as e:
            logger.error(f"Access to gpsd denied: {e}")
            self._enabled = False
            self._fail(e)
        except (ConnectionError, OSError) as e:
            logger.debug(f"gpsd connection error: {e}")
            logger.error("gpsd is not running")
            self._fail(e)
        except ValueError as e:
            logger.error(f"gpsd protocol error: {e}")
            self._fail(e)
        except Exception as e:
            logger.critical(f"Unknown error: {traceback.format_exc()}")
            self._fail(e)

    def _deliver(self, sample: Sample):
        delegate = self.delegate
        if delegate is not None:
            delegate.provider_did_update(sample)

    def _fail(self, exc: BaseException):
        delegate = self.delegate
        if delegate is not None:
            delegate.provider_did_fail(exc)
