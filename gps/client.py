import asyncio
import json
import logging

from gps.schemas import GST, TPV, Device, Devices, Error, Sky, Version, Watch

WATCH = "?WATCH={}\r\n"

logger = logging.getLogger(__name__)


class Client:
    """Reads reports from a gpsd daemon over its JSON protocol."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        watch_config: Watch | None = None,
    ):
        self.__reader = reader
        self.__writer = writer

        self._version = None
        self._devices = None
        self._watch = None

        self.watch_config = watch_config or Watch()

    @property
    def version(self) -> Version | None:
        return self._version

    @property
    def devices(self) -> Devices | None:
        return self._devices

    async def __read(self) -> tuple[str, dict]:
        line = await self.__reader.readline()
        if not line:
            raise ConnectionError("Connection closed by server")

        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(f"Malformed report: {line!r}") from e
        return str(data.get("class", "")).upper(), data

    async def close(self):
        self.__writer.close()
        await self.__writer.wait_closed()

    @staticmethod
    def __class_factory(class_type: str, data: dict) -> object:
        match class_type:
            case "TPV":
                return TPV.from_json(data)
            case "VERSION":
                return Version.from_json(data)
            case "DEVICES":
                return Devices.from_json(data)
            case "DEVICE":
                return Device.from_json(data)
            case "WATCH":
                return Watch.from_json(data)
            case "SKY":
                return Sky.from_json(data)
            case "GST":
                return GST.from_json(data)
            case "ERROR":
                error = Error.from_json(data)
                raise ValueError(f"Error: {error.message}")
            case _:
                logger.debug(f"Skipping unsupported report class: {class_type}")
                return None

    async def recv(self):
        class_type, data = await self.__read()
        result = self.__class_factory(class_type, data)
        if isinstance(result, Version):
            self._version = result
        if isinstance(result, Devices):
            self._devices = result
        if isinstance(result, Watch):
            self._watch = result
        return result

    async def watch(self):
        self.__writer.write(WATCH.format(self.watch_config.to_json()).encode())
        await self.__writer.drain()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def __aiter__(self):
        return self

    async def __anext__(self):
        return await self.recv()


async def open(host: str = "127.0.0.1", port: int = 2947) -> Client:
    reader, writer = await asyncio.open_connection(host, port)
    client = Client(reader, writer)
    await client.watch()
    return client
