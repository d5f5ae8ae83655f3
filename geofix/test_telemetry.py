import asyncio
import json
import math

import httpx

from geofix.conftest import sample
from geofix.telemetry import LogObserver, RetryObserver, TelemetryObserver


def _post(handler, s):
    async def run():
        client = httpx.AsyncClient(
            base_url="https://edge.test", transport=httpx.MockTransport(handler)
        )
        observer = TelemetryObserver("https://edge.test", "secret", "instance-1", client=client)
        observer.on_did_update_location(s, None)
        await observer.aclose()

    asyncio.run(run())


def test_telemetry_posts_accepted_fix():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(204)

    _post(handler, sample(4.0))

    [request] = requests
    assert request.method == "POST"
    assert request.url.path == "/location"
    assert request.headers["X-Instance-ID"] == "instance-1"
    assert request.headers["Authorization"] == "Basic secret"
    body = json.loads(request.content)
    assert body["latitude"] == 52.0
    assert body["accuracy"] == 4.0


def test_telemetry_drops_infinite_accuracy():
    assert TelemetryObserver.payload(sample(math.inf))["accuracy"] is None


def test_telemetry_http_error_is_logged(caplog):
    _post(lambda request: httpx.Response(500), sample(4.0))

    assert "HTTP Error" in caplog.text


def test_log_observer(caplog):
    caplog.set_level("INFO")
    observer = LogObserver()

    observer.on_did_update_location(sample(4.0), None)
    observer.on_did_fail_with_error(None)

    assert "Location (52.0, 4.0)" in caplog.text
    assert "No location determined" in caplog.text


def test_retry_after_failure_when_looping(manager, provider, options, loop):
    options.loop = True
    options.loop_time_interval = 30.0
    retry = RetryObserver(manager, loop)
    manager.add_observer(retry)

    manager.start_updating_location()
    provider.fail(ConnectionError("gpsd is down"))
    assert retry.pending

    loop.advance(29.0)
    assert provider.starts == 1

    loop.advance(1.0)
    assert provider.starts == 2
    assert manager.is_querying
    assert not retry.pending


def test_retry_after_deadline_without_fix(manager, provider, options, loop):
    options.loop = True
    retry = RetryObserver(manager, loop)
    manager.add_observer(retry)

    manager.start_updating_location()
    loop.advance(options.querying_interval)
    assert retry.pending

    loop.advance(options.loop_time_interval)
    assert provider.starts == 2


def test_no_retry_without_loop(manager, provider, loop):
    retry = RetryObserver(manager, loop)
    manager.add_observer(retry)

    manager.start_updating_location()
    provider.fail(ConnectionError("gpsd is down"))

    assert not retry.pending


def test_stop_cancels_retry(manager, provider, options, loop):
    options.loop = True
    retry = RetryObserver(manager, loop)
    manager.add_observer(retry)

    manager.start_updating_location()
    provider.fail(ConnectionError("gpsd is down"))
    manager.stop_updating_location()
    loop.advance(60.0)

    assert not retry.pending
    assert provider.starts == 1
