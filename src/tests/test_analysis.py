"""
Tests for transcript analysis and platform content generation.
"""

import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from reelcut.analysis import (
    analyze_captions,
    extract_json_object,
    format_platform_file,
    generate_platform_content,
    save_analysis,
)
from reelcut.config import Settings
from reelcut.models import PLATFORMS, PlatformContent


class FakeChat:
    """Returns queued replies; an Exception in the queue is raised instead."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(replies):
    chat = FakeChat(replies)
    return SimpleNamespace(chat=SimpleNamespace(completions=chat)), chat


def _settings(**kwargs):
    return Settings(base_dir=Path("."), **kwargs)


def test_extract_json_object_from_fenced_reply():
    text = 'Sure! Here it is:\n```json\n{"summary": "Hi", "keyPoints": ["a"]}\n```\nAnything else?'
    assert extract_json_object(text) == {"summary": "Hi", "keyPoints": ["a"]}


def test_extract_json_object_braces_inside_strings():
    text = 'prefix {"title": "use {curly} braces", "n": {"x": 1}} suffix }'
    assert extract_json_object(text) == {"title": "use {curly} braces", "n": {"x": 1}}


def test_extract_json_object_skips_invalid_candidates():
    assert extract_json_object("{not json} then {\"ok\": true}") == {"ok": True}


@pytest.mark.parametrize("text", ["", "no json here", "[1, 2, 3]", None])
def test_extract_json_object_raises_when_missing(text):
    with pytest.raises(ValueError):
        extract_json_object(text)


def test_analyze_captions_retries_bad_replies():
    client, chat = _client(["not json", '{"summary": "Short.", "keyPoints": ["one", "two"]}'])

    result = analyze_captions(client, "1\n00:00:00,000 --> 00:00:01,000\nHi\n", "talk", _settings())

    assert len(chat.calls) == 2
    assert result.source_name == "talk"
    assert result.summary == "Short."
    assert result.key_points == ("one", "two")


def test_analyze_captions_gives_up_after_max_retries():
    client, chat = _client([RuntimeError("rate limited")] * 2)

    with pytest.raises(RuntimeError, match="rate limited"):
        analyze_captions(client, "", "talk", _settings(max_retries=2))
    assert len(chat.calls) == 2


def test_analyze_captions_requires_client():
    with pytest.raises(RuntimeError):
        analyze_captions(None, "", "talk", _settings(max_retries=1))


def _platform_reply(platforms=PLATFORMS):
    return json.dumps(
        {p: {"hashtags": f"#{p}", "background": "bg", "title": f"{p} title", "description": "desc"} for p in platforms}
    )


def test_generate_platform_content():
    client, chat = _client([_platform_reply()])

    content = generate_platform_content(client, "srt", "talk", _settings(key_phrase="Buy now"))

    assert set(content) == set(PLATFORMS)
    assert content["tiktok"].title == "tiktok title"
    assert "Buy now" in chat.calls[0]["messages"][0]["content"]


def test_generate_platform_content_retries_missing_platform():
    client, chat = _client([_platform_reply(PLATFORMS[:2]), _platform_reply()])

    content = generate_platform_content(client, "srt", "talk", _settings())

    assert len(chat.calls) == 2
    assert content["youtube"].hashtags == "#youtube"


def test_format_platform_file():
    text = format_platform_file(PlatformContent(hashtags="#a", background="bg", title="T", description="D"))
    assert text == "Hashtags:\n#a\n\nBackground:\nbg\n\nTitle:\nT\n\nDescription:\nD"


def test_save_analysis(tmp_path):
    client, _ = _client(['{"summary": "S", "keyPoints": []}'])
    result = analyze_captions(client, "", "talk", _settings())
    path = tmp_path / "talk_analysis.json"

    save_analysis(result, path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["sourceName"] == "talk"
    assert data["keyPoints"] == []
