"""
Tests for data models and their JSON shapes.
"""

import re

import pytest

from reelcut.models import (
    ApprovedSelection,
    CaptionSegment,
    Clip,
    ClipsMetadata,
    HighlightSet,
    file_timestamp,
    format_duration,
    parse_duration,
    utc_now_iso,
)


def test_durations():
    assert format_duration(5) == "5.0s"
    assert format_duration(3.26) == "3.3s"
    assert parse_duration("5.0s") == 5.0
    assert parse_duration(" 12.5s ") == 12.5


def test_timestamps():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}", file_timestamp())
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", utc_now_iso())


def test_highlight_set_json_keys():
    hs = HighlightSet(
        source_name="talk",
        highlights=(CaptionSegment(id=3, start_time="00:00:01.000", end_time="00:00:02.000", text="Hi"),),
        created_at="2025-01-31T12:00:00.000Z",
    )

    data = hs.to_dict()

    assert data == {
        "sourceName": "talk",
        "highlights": [{"id": 3, "startTime": "00:00:01.000", "endTime": "00:00:02.000", "text": "Hi"}],
        "createdAt": "2025-01-31T12:00:00.000Z",
    }
    assert HighlightSet.from_dict(data) == hs


def test_clips_metadata_total():
    clips = (Clip(id=1, file="a.mp4", duration="1.0s", text=""), Clip(id=2, file="b.mp4", duration="2.0s", text=""))
    meta = ClipsMetadata(source_name="talk", clips=clips)

    assert meta.total_clips == 2
    assert meta.to_dict()["totalClips"] == 2


def test_approved_selection_json_keys():
    clip = Clip(id=1, file="a.mp4", duration="1.0s", text="")
    approved = ApprovedSelection(source_name="talk", source_folder="/x", clips=(clip, clip), order=(1, 1))

    data = approved.to_dict()

    assert set(data) == {"sourceName", "sourceFolder", "approvedAt", "clips", "order"}
    assert data["order"] == [1, 1]
    with pytest.raises(ValueError):
        ApprovedSelection(source_name="talk", source_folder="/x", clips=(clip,), order=(1, 1))
