"""
Audio and video processing utilities using ffmpeg/ffprobe.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger("reelcut")

VIDEO_EXTENSIONS = (".mp4", ".avi", ".mov", ".mkv", ".webm", ".flv", ".wmv")
AUDIO_EXTENSIONS = (".mp3", ".wav", ".m4a")


class FFmpegError(RuntimeError):
    """An ffmpeg/ffprobe process exited non-zero."""


class FFmpegNotFoundError(FFmpegError):
    pass


@dataclass(frozen=True)
class EncodeProfile:
    """Fixed re-encode settings shared by the cutter and the assembler."""

    video_codec: str = "libx265"
    preset: str = "fast"
    crf: int = 15
    tag: str = "hvc1"
    pix_fmt: str = "yuv420p10le"
    x265_params: str = (
        "colorprim=bt2020:transfer=arib-std-b67:colormatrix=bt2020nc:range=limited:hdr-opt=1"
    )
    audio_codec: str = "aac"
    audio_bitrate: str = "192k"

    def output_args(self) -> list[str]:
        args = [
            "-c:v", self.video_codec,
            "-preset", self.preset,
            "-crf", str(self.crf),
            "-tag:v", self.tag,
            "-pix_fmt", self.pix_fmt,
        ]
        if self.x265_params:
            args += ["-x265-params", self.x265_params]
        args += ["-c:a", self.audio_codec, "-b:a", self.audio_bitrate]
        return args


# HEVC 10-bit, BT.2020 HLG.
HDR_PROFILE = EncodeProfile()


def run(cmd: list[str], *, check: bool = True) -> str:
    """Run a command and return its combined stdout/stderr."""
    logger.debug("Running: %s", " ".join(map(str, cmd)))
    proc = subprocess.run(
        [str(c) for c in cmd], stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True, check=False
    )
    if proc.returncode != 0 and check:
        tail = "\n".join((proc.stdout or "").strip().splitlines()[-5:])
        logger.debug("Command failed with code %d: %s", proc.returncode, proc.stdout)
        raise FFmpegError(f"{Path(str(cmd[0])).name} exited with code {proc.returncode}: {tail}")
    return proc.stdout


def check_ffmpeg() -> None:
    """Raise FFmpegNotFoundError if ffmpeg/ffprobe are not on PATH."""
    for cmd in ("ffmpeg", "ffprobe"):
        if shutil.which(cmd) is None:
            raise FFmpegNotFoundError(f"{cmd} not found on PATH")


def ensure_dir(path: str | Path) -> None:
    """Ensure directory exists."""
    if path:
        Path(path).mkdir(parents=True, exist_ok=True)


def extract_audio(input_video: str | Path, out_audio: str | Path, bitrate: str = "192k") -> None:
    """Extract the audio track of a video as MP3."""
    ensure_dir(Path(out_audio).parent)
    cmd = [
        "ffmpeg",
        "-y",
        "-i",
        str(input_video),
        "-vn",
        "-acodec",
        "libmp3lame",
        "-b:a",
        bitrate,
        str(out_audio),
    ]
    run(cmd)


def probe_duration(path: str | Path) -> float:
    """Container duration in seconds as reported by ffprobe."""
    out = run(
        [
            "ffprobe",
            "-v",
            "error",
            "-show_entries",
            "format=duration",
            "-of",
            "default=noprint_wrappers=1:nokey=1",
            str(path),
        ]
    )
    try:
        return float(out.strip())
    except ValueError:
        return 0.0


def cut_segment(
    input_video: str | Path,
    start: float,
    duration: float,
    output_video: str | Path,
    profile: EncodeProfile = HDR_PROFILE,
) -> None:
    """Re-encode ``[start, start + duration)`` of a video.

    Always re-encodes, so cut points are frame-accurate rather than snapped
    to keyframes.
    """
    cmd = [
        "ffmpeg",
        "-y",
        "-ss",
        f"{start:.3f}",
        "-i",
        str(input_video),
        "-t",
        f"{duration:.3f}",
        *profile.output_args(),
        str(output_video),
    ]
    run(cmd)


def build_concat_filter(n: int) -> str:
    """Filter graph joining the video+audio of ``n`` inputs into [outv][outa]."""
    if n < 1:
        raise ValueError("concat filter needs at least one input")
    inputs = "".join(f"[{i}:v][{i}:a]" for i in range(n))
    return f"{inputs}concat=n={n}:v=1:a=1[outv][outa]"


def concat_videos(
    input_videos: list[str | Path],
    output_video: str | Path,
    profile: EncodeProfile = HDR_PROFILE,
) -> None:
    """Concatenate inputs in one filter_complex pass and re-encode the result.

    Inputs may differ in resolution or stream parameters.
    """
    if not input_videos:
        raise ValueError("concat_videos called with empty input list")
    cmd: list[str] = ["ffmpeg", "-y"]
    for path in input_videos:
        cmd += ["-i", str(path)]
    cmd += [
        "-filter_complex",
        build_concat_filter(len(input_videos)),
        "-map",
        "[outv]",
        "-map",
        "[outa]",
        *profile.output_args(),
        str(output_video),
    ]
    run(cmd)
