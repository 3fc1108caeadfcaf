"""Client and server identification exchanged in the handshake."""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .protocol import DBMS_MIN_REVISION_WITH_SERVER_TIMEZONE

__all__ = [
    "CLIENT_NAME",
    "CLICKHOUSE_REVISION",
    "CLICKHOUSE_DBMS_VERSION_MAJOR",
    "CLICKHOUSE_DBMS_VERSION_MINOR",
    "ClientInfo",
    "ServerInfo",
]

CLIENT_NAME = "chwire"
CLICKHOUSE_REVISION = 54213
CLICKHOUSE_DBMS_VERSION_MAJOR = 1
CLICKHOUSE_DBMS_VERSION_MINOR = 1

_READ_ERRORS = (EOFError, ValueError, OverflowError)


def _load_timezone(name: str) -> _dt.tzinfo:
    if name in ("", "UTC"):
        return _dt.timezone.utc
    return ZoneInfo(name)


class ClientInfo:
    """The client's name and version as sent in the hello packet."""

    def write(self, encoder) -> None:
        """Write the client name, major and minor version and revision."""
        encoder.write_string(CLIENT_NAME)
        encoder.write_uvarint(CLICKHOUSE_DBMS_VERSION_MAJOR)
        encoder.write_uvarint(CLICKHOUSE_DBMS_VERSION_MINOR)
        encoder.write_uvarint(CLICKHOUSE_REVISION)

    def __str__(self) -> str:
        return (
            f"{CLIENT_NAME} {CLICKHOUSE_DBMS_VERSION_MAJOR}."
            f"{CLICKHOUSE_DBMS_VERSION_MINOR}.{CLICKHOUSE_REVISION}"
        )


@dataclass
class ServerInfo:
    """The server's name, version and timezone from its hello packet."""

    name: str = ""
    revision: int = 0
    minor_version: int = 0
    major_version: int = 0
    timezone: Optional[_dt.tzinfo] = None

    @classmethod
    def read(cls, decoder) -> "ServerInfo":
        """Read a server hello body from ``decoder``."""
        info = cls()
        try:
            info.name = decoder.read_string()
        except _READ_ERRORS as exc:
            raise ValueError(f"could not read server name: {exc}") from exc
        try:
            info.major_version = decoder.read_uvarint()
        except _READ_ERRORS as exc:
            raise ValueError(f"could not read server major version: {exc}") from exc
        try:
            info.minor_version = decoder.read_uvarint()
        except _READ_ERRORS as exc:
            raise ValueError(f"could not read server minor version: {exc}") from exc
        try:
            info.revision = decoder.read_uvarint()
        except _READ_ERRORS as exc:
            raise ValueError(f"could not read server revision: {exc}") from exc
        if info.revision >= DBMS_MIN_REVISION_WITH_SERVER_TIMEZONE:
            try:
                zone = decoder.read_string()
            except _READ_ERRORS as exc:
                raise ValueError(f"could not read server timezone: {exc}") from exc
            try:
                info.timezone = _load_timezone(zone)
            except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
                raise ValueError(f"could not load time location: {exc}") from exc
        return info

    def __str__(self) -> str:
        zone = "UTC" if self.timezone is None else str(self.timezone)
        return (
            f"{self.name} {self.major_version}.{self.minor_version}."
            f"{self.revision} ({zone})"
        )