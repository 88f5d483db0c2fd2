"""
Broadcast payload — built fresh from the snapshot for every send.

Wire format (one JSON object per broadcast):
  time, timezone, fileName, fileType, folderName, uptime, status
"""

import json
import random
from dataclasses import dataclass, asdict
from datetime import datetime

import tzlocal

from .constants import ACTIVITY_PHRASES

# Python attribute → wire key
_WIRE_KEYS = {
    "time": "time",
    "timezone": "timezone",
    "file_name": "fileName",
    "file_type": "fileType",
    "folder_name": "folderName",
    "uptime": "uptime",
    "status": "status",
}


def format_uptime(elapsed_seconds):
    """125.0 → "2m 5s". Minutes are not rolled into hours."""
    total = int(max(elapsed_seconds, 0))
    minutes, seconds = divmod(total, 60)
    return f"{minutes}m {seconds}s"


def format_clock(now=None):
    """Local wall-clock time as "H:MM AM/PM" (no leading zero on the hour)."""
    now = now or datetime.now()
    hour = now.hour % 12 or 12
    suffix = "AM" if now.hour < 12 else "PM"
    return f"{hour}:{now.minute:02d} {suffix}"


def local_timezone_name():
    """IANA name of the local zone, e.g. "Europe/Berlin"."""
    return tzlocal.get_localzone_name()


def activity_caption(file_name, rng=random):
    """Random phrase from ACTIVITY_PHRASES followed by the file name."""
    return f"{rng.choice(ACTIVITY_PHRASES)} {file_name}"


@dataclass(frozen=True)
class BroadcastMessage:
    time: str
    timezone: str
    file_name: str
    file_type: str
    folder_name: str
    uptime: str
    status: str

    @classmethod
    def from_snapshot(cls, snapshot, uptime_seconds, now=None, timezone=None, rng=random):
        return cls(
            time=format_clock(now),
            timezone=timezone or local_timezone_name(),
            file_name=snapshot.file_name,
            file_type=snapshot.file_type,
            folder_name=snapshot.folder_name,
            uptime=format_uptime(uptime_seconds),
            status=activity_caption(snapshot.file_name, rng),
        )

    def to_dict(self):
        return {_WIRE_KEYS[k]: v for k, v in asdict(self).items()}

    def to_json(self):
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text):
        """
        Parse a payload back. Accepts the compact
        {uptime, folderName, fileName, fileType} shape too; missing
        fields come back as "".
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Broadcast payload must be a JSON object")
        return cls(**{attr: str(data.get(key, "")) for attr, key in _WIRE_KEYS.items()})
