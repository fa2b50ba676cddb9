"""
Transcript summaries and per-platform copy generated with GPT.
"""

import json
import logging
import re
from pathlib import Path

from openai import OpenAI

from .batch import retry_call
from .config import Settings
from .models import PLATFORMS, AnalysisResult, PlatformContent

logger = logging.getLogger("reelcut")

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def extract_json_object(text: str) -> dict:
    """Return the first top-level JSON object embedded in ``text``.

    Markdown fences and surrounding prose are ignored. Braces inside JSON
    strings do not count towards nesting.
    """
    cleaned = _FENCE_RE.sub("", text or "")
    start = cleaned.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(cleaned)):
            ch = cleaned[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    candidate = cleaned[start : i + 1]
                    try:
                        parsed = json.loads(candidate)
                    except json.JSONDecodeError:
                        break
                    if isinstance(parsed, dict):
                        return parsed
                    break
        start = cleaned.find("{", start + 1)
    raise ValueError("Could not find JSON object in response")


def _chat(client: OpenAI, model: str, prompt: str, max_tokens: int) -> str:
    if client is None:
        raise RuntimeError("OpenAI client is not initialized (missing OPENAI_API_KEY)")
    response = client.chat.completions.create(
        model=model,
        messages=[{"role": "user", "content": prompt}],
        temperature=0.3,
        max_tokens=max_tokens,
    )
    return response.choices[0].message.content or ""


def analyze_captions(client: OpenAI, srt_content: str, source_name: str, settings: Settings) -> AnalysisResult:
    """Summarize a transcript into a short summary and key points."""
    prompt = f"""Analyze the following video transcript (SRT format) and provide:
1. A short summary (2-3 sentences) in {settings.content_language}
2. The key points or topics covered (as a list) in {settings.content_language}

Transcript:
{srt_content}

Return ONLY JSON with the keys "summary" (string) and "keyPoints" (array of strings)."""

    def attempt() -> AnalysisResult:
        parsed = extract_json_object(_chat(client, settings.text_model, prompt, max_tokens=1024))
        return AnalysisResult(
            source_name=source_name,
            summary=str(parsed.get("summary", "")),
            key_points=tuple(str(p) for p in parsed.get("keyPoints", []) or []),
        )

    logger.info("Analyzing transcript with %s: %s", settings.text_model, source_name)
    return retry_call(attempt, settings.max_retries, desc=f"analysis of {source_name}")


def save_analysis(result: AnalysisResult, path: str | Path) -> None:
    Path(path).write_text(json.dumps(result.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Saved analysis -> %s", path)


def _platform_prompt(srt_content: str, settings: Settings) -> str:
    skeleton = json.dumps(
        {p: {"hashtags": "...", "background": "...", "title": "...", "description": "..."} for p in PLATFORMS},
        indent=2,
    )
    phrase = ""
    if settings.key_phrase:
        phrase = (
            f'\nIMPORTANT: the main sales phrase is "{settings.key_phrase}". Weave it (or natural '
            "variants of it) into the titles and descriptions where it fits.\n"
        )
    return f"""Based on the video transcript below, write content optimized for {len(PLATFORMS)} social media platforms.
{phrase}
For each platform provide, in {settings.content_language}:
- hashtags: relevant hashtags (comma separated)
- background: a short context or background (1-2 sentences)
- title: a title optimized for the platform
- description: a description optimized for the platform

Transcript:
{srt_content}

Return ONLY valid JSON with exactly this structure (no markdown, no extra text):
{skeleton}"""


def generate_platform_content(
    client: OpenAI, srt_content: str, source_name: str, settings: Settings
) -> dict[str, PlatformContent]:
    """Per-platform hashtags, background, title and description."""
    prompt = _platform_prompt(srt_content, settings)

    def attempt() -> dict[str, PlatformContent]:
        parsed = extract_json_object(_chat(client, settings.text_model, prompt, max_tokens=2000))
        missing = [p for p in PLATFORMS if not isinstance(parsed.get(p), dict)]
        if missing:
            raise ValueError(f"Response is missing platforms: {', '.join(missing)}")
        return {p: PlatformContent.from_dict(parsed[p]) for p in PLATFORMS}

    logger.info("Generating platform content for %s", source_name)
    return retry_call(attempt, settings.max_retries, desc=f"platform content for {source_name}")


def format_platform_file(content: PlatformContent) -> str:
    return (
        f"Hashtags:\n{content.hashtags}\n\n"
        f"Background:\n{content.background}\n\n"
        f"Title:\n{content.title}\n\n"
        f"Description:\n{content.description}"
    )
