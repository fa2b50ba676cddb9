"""
Project folders in ready-video: source files plus per-platform copy.
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path

from openai import OpenAI

from .analysis import format_platform_file, generate_platform_content
from .config import Settings
from .io_ffmpeg import ensure_dir

logger = logging.getLogger("reelcut")


def project_folder_name(now: datetime | None = None) -> str:
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")


def organize_project(
    video_path: str | Path,
    audio_path: str | Path,
    srt_path: str | Path,
    settings: Settings,
    client: OpenAI | None = None,
) -> Path:
    """Create ``ready-video/<timestamp>/`` with copies and platform files.

    Platform copy is generated first; nothing is written if it fails.
    """
    srt_path = Path(srt_path)
    srt_content = srt_path.read_text(encoding="utf-8")
    content = generate_platform_content(client, srt_content, Path(video_path).name, settings)

    project = settings.ready_dir / project_folder_name()
    ensure_dir(project)
    logger.info("Project folder: %s", project)

    for src in (video_path, audio_path, srt_path):
        shutil.copy2(src, project / Path(src).name)
    logger.info("Copied video, audio and captions into %s", project.name)

    for platform, platform_content in content.items():
        (project / f"{platform}.txt").write_text(format_platform_file(platform_content), encoding="utf-8")
        logger.info("Saved %s.txt", platform)
    return project
