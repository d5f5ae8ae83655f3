import json
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from enum import IntEnum


def _parse_time(value) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    # gpsd reports UTC as "2024-05-01T12:00:00.000Z"
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _filter(cls, data: dict) -> dict:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


class Mode(IntEnum):
    UNKNOWN = 0
    NO_FIX = 1
    D2_FIX = 2
    D3_FIX = 3

    def __str__(self) -> str:
        return self.name


@dataclass
class Watch:
    enable: bool | None = True
    json: bool | None = True
    nmea: bool | None = False
    raw: int | None = None
    scaled: bool | None = False
    split24: bool | None = False
    pps: bool | None = False
    device: str = ""
    remote: str = ""

    def to_json(self) -> str:
        data = {k: v for k, v in asdict(self).items() if v not in (None, "")}
        return json.dumps(data, separators=(",", ":"))

    @staticmethod
    def from_json(data: dict) -> "Watch":
        return Watch(**_filter(Watch, data))


@dataclass
class Version:
    release: str
    rev: str
    proto_major: int
    proto_minor: int
    remote: str | None = None

    @property
    def proto(self) -> tuple[int, int]:
        return self.proto_major, self.proto_minor

    @staticmethod
    def from_json(data: dict) -> "Version":
        return Version(**_filter(Version, data))


@dataclass
class Device:
    activated: datetime | None = None
    bps: int | None = None
    cycle: float | None = None
    driver: str | None = None
    flags: int | None = None
    native: int | None = None
    path: str | None = None
    readonly: bool | None = None
    subtype: str | None = None

    @staticmethod
    def from_json(data: dict) -> "Device":
        device = Device(**_filter(Device, data))
        device.activated = _parse_time(device.activated)
        return device


@dataclass
class Devices:
    devices: list[Device]
    remote: str | None = None

    @staticmethod
    def from_json(data: dict) -> "Devices":
        return Devices(
            devices=[Device.from_json(d) for d in data.get("devices", [])],
            remote=data.get("remote"),
        )


@dataclass
class TPV:
    device: str | None = None
    mode: Mode = Mode.UNKNOWN
    time: datetime | None = None
    lat: float | None = None
    lon: float | None = None
    alt: float | None = None  # Deprecated
    altHAE: float | None = None
    altMSL: float | None = None
    eph: float | None = None
    epx: float | None = None
    epy: float | None = None
    epv: float | None = None
    speed: float | None = None
    track: float | None = None

    @property
    def has_fix(self) -> bool:
        return self.mode >= Mode.D2_FIX and self.lat is not None and self.lon is not None

    @property
    def horizontal_error(self) -> float | None:
        if self.eph is not None:
            return self.eph
        if self.epx is not None and self.epy is not None:
            return max(self.epx, self.epy)
        return None

    @staticmethod
    def from_json(data: dict) -> "TPV":
        tpv = TPV(**_filter(TPV, data))
        tpv.mode = Mode(tpv.mode)
        tpv.time = _parse_time(tpv.time)
        return tpv


@dataclass
class GST:
    device: str | None = None
    time: datetime | None = None
    rms: float | None = None
    major: float | None = None
    minor: float | None = None
    orient: float | None = None
    alt: float | None = None
    lat: float | None = None
    lon: float | None = None

    @staticmethod
    def from_json(data: dict) -> "GST":
        gst = GST(**_filter(GST, data))
        gst.time = _parse_time(gst.time)
        return gst


@dataclass
class Sky:
    time: datetime | None = None
    device: str | None = None
    nSat: int | None = None
    uSat: int | None = None
    hdop: float | None = None
    vdop: float | None = None
    pdop: float | None = None

    @staticmethod
    def from_json(data: dict) -> "Sky":
        sky = Sky(**_filter(Sky, data))
        sky.time = _parse_time(sky.time)
        return sky


@dataclass
class Error:
    message: str

    def __str__(self) -> str:
        return self.message

    @staticmethod
    def from_json(data: dict) -> "Error":
        return Error(**_filter(Error, data))
