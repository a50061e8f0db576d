"""Client and server identification exchanged in the hello packets."""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Any, Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .protocol import DBMS_MIN_REVISION_WITH_SERVER_TIMEZONE

CLIENT_NAME = "chproto"
CLIENT_REVISION = 54213
CLIENT_VERSION_MAJOR = 1
CLIENT_VERSION_MINOR = 1


class ClientInfo:
    """The name and version this client announces to the server."""

    def write(self, encoder: Any) -> None:
        """Write the client name, version and revision."""
        encoder.write_string(CLIENT_NAME)
        encoder.write_uvarint(CLIENT_VERSION_MAJOR)
        encoder.write_uvarint(CLIENT_VERSION_MINOR)
        encoder.write_uvarint(CLIENT_REVISION)

    def __str__(self) -> str:
        return (
            f"{CLIENT_NAME} {CLIENT_VERSION_MAJOR}.{CLIENT_VERSION_MINOR}."
            f"{CLIENT_REVISION}"
        )


def _load_location(name: str) -> Optional[_dt.tzinfo]:
    """Resolve a zone name; ``None`` stands for local time."""
    if name in ("", "UTC"):
        return _dt.timezone.utc
    if name == "Local":
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"could not load time location: {exc}") from exc


def _read_field(read: Callable[[], Any], what: str) -> Any:
    try:
        return read()
    except (EOFError, ValueError) as exc:
        raise ValueError(f"could not read {what}: {exc}") from exc


@dataclass
class ServerInfo:
    """What the server reports about itself; ``timezone`` None means local time."""

    name: str = ""
    revision: int = 0
    minor_version: int = 0
    major_version: int = 0
    timezone: Optional[_dt.tzinfo] = None

    def read(self, decoder: Any) -> "ServerInfo":
        """Fill the fields from the server hello; returns ``self``."""
        self.name = _read_field(decoder.read_string, "server name")
        self.major_version = _read_field(decoder.read_uvarint, "server major version")
        self.minor_version = _read_field(decoder.read_uvarint, "server minor version")
        self.revision = _read_field(decoder.read_uvarint, "server revision")
        if self.revision >= DBMS_MIN_REVISION_WITH_SERVER_TIMEZONE:
            zone = _read_field(decoder.read_string, "server timezone")
            self.timezone = _load_location(zone)
        return self

    def __str__(self) -> str:
        zone = "Local" if self.timezone is None else str(self.timezone)
        return (
            f"{self.name} {self.major_version}.{self.minor_version}."
            f"{self.revision} ({zone})"
        )