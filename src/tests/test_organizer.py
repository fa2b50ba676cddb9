"""
Tests for ready-video project folders.
"""

import json
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from reelcut.config import Settings
from reelcut.models import PLATFORMS
from reelcut.organizer import organize_project, project_folder_name


class FakeCompletions:
    def __init__(self, reply):
        self.reply = reply

    def create(self, **kwargs):
        if isinstance(self.reply, Exception):
            raise self.reply
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(reply):
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(reply)))


@pytest.fixture
def sources(tmp_path):
    sep = tmp_path / "separated-audio"
    sep.mkdir()
    video = sep / "talk.mov"
    audio = sep / "talk.mp3"
    srt = sep / "talk.srt"
    video.write_bytes(b"v")
    audio.write_bytes(b"a")
    srt.write_text("1\n00:00:00,000 --> 00:00:01,000\nHi\n", encoding="utf-8")
    return video, audio, srt


def test_project_folder_name():
    assert project_folder_name(datetime(2025, 1, 31, 12, 5, 9)) == "20250131_120509"


def test_organize_project(tmp_path, sources):
    reply = json.dumps({p: {"hashtags": "#x", "background": "b", "title": p, "description": "d"} for p in PLATFORMS})
    settings = Settings(base_dir=Path(tmp_path))

    project = organize_project(*sources, settings, client=_client(reply))

    assert project.parent == settings.ready_dir
    assert sorted(p.name for p in project.iterdir()) == sorted(
        ["talk.mov", "talk.mp3", "talk.srt"] + [f"{p}.txt" for p in PLATFORMS]
    )
    assert (project / "linkedin.txt").read_text(encoding="utf-8").startswith("Hashtags:\n#x")


def test_organize_project_failure_writes_nothing(tmp_path, sources):
    settings = Settings(base_dir=Path(tmp_path), max_retries=1)

    with pytest.raises(RuntimeError):
        organize_project(*sources, settings, client=_client(RuntimeError("service down")))

    assert not settings.ready_dir.exists()
