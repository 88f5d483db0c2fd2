import json
import random
from datetime import datetime
from unittest.mock import patch

import pytest

from amp_core.constants import ACTIVITY_PHRASES
from amp_core.message import (
    BroadcastMessage, activity_caption, format_clock, format_uptime, local_timezone_name,
)
from amp_core.state import EditorSnapshot


@pytest.mark.parametrize("seconds, expected", [
    (0, "0m 0s"),
    (59.9, "0m 59s"),
    (125.0, "2m 5s"),
    (3725, "62m 5s"),
    (-3, "0m 0s"),
])
def test_format_uptime(seconds, expected):
    assert format_uptime(seconds) == expected


@pytest.mark.parametrize("hour, minute, expected", [
    (0, 5, "12:05 AM"),
    (9, 30, "9:30 AM"),
    (12, 0, "12:00 PM"),
    (15, 7, "3:07 PM"),
    (23, 59, "11:59 PM"),
])
def test_format_clock(hour, minute, expected):
    assert format_clock(datetime(2024, 5, 1, hour, minute)) == expected


def test_local_timezone_name_uses_tzlocal():
    with patch("amp_core.message.tzlocal.get_localzone_name", return_value="Asia/Karachi"):
        assert local_timezone_name() == "Asia/Karachi"


def test_activity_caption_prefix_from_phrase_set():
    caption = activity_caption("main.py", random.Random(7))
    prefix, _, name = caption.rpartition(" ")
    assert name == "main.py"
    assert prefix in ACTIVITY_PHRASES


def _message():
    snap = EditorSnapshot(folder_name="amp", file_name="main.test.ts", file_type="ts")
    return BroadcastMessage.from_snapshot(
        snap, 125.0, now=datetime(2024, 5, 1, 15, 7), timezone="Europe/Berlin",
        rng=random.Random(3),
    )


def test_wire_fields():
    payload = json.loads(_message().to_json())
    assert set(payload) == {
        "time", "timezone", "fileName", "fileType", "folderName", "uptime", "status",
    }
    assert payload["time"] == "3:07 PM"
    assert payload["timezone"] == "Europe/Berlin"
    assert payload["fileName"] == "main.test.ts"
    assert payload["fileType"] == "ts"
    assert payload["folderName"] == "amp"
    assert payload["uptime"] == "2m 5s"
    assert payload["status"].endswith(" main.test.ts")


def test_round_trip_keeps_fields():
    original = _message()
    parsed = BroadcastMessage.from_json(original.to_json())
    assert parsed == original
    assert any(parsed.status.startswith(p + " ") for p in ACTIVITY_PHRASES)


def test_parses_compact_payload():
    text = json.dumps({"uptime": "1m 2s", "folderName": "f", "fileName": "a.go", "fileType": "go"})
    parsed = BroadcastMessage.from_json(text)
    assert parsed.file_name == "a.go"
    assert parsed.uptime == "1m 2s"
    assert parsed.status == ""
    assert parsed.time == ""


def test_rejects_non_object_payload():
    with pytest.raises(ValueError):
        BroadcastMessage.from_json("[1, 2]")
