"""
Step orchestration over the upload / separated-audio / ready-video folders.

Every step enumerates its inputs from the previous stage's folder, processes
them one at a time and skips any item whose output already exists unless the
operator agrees to overwrite it.
"""

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from openai import OpenAI

from . import state
from .analysis import analyze_captions, save_analysis
from .approval import approved_path, find_highlight_folders, load_approved, save_approved, select_approved
from .assembler import (
    COMPLETE_DIRNAME,
    assemble_full_video,
    complete_metadata_path,
    find_approved,
    find_intro,
    find_original_video,
)
from .batch import run_sequential
from .config import Settings
from .cutter import cut_highlights, load_clips_metadata
from .highlights import (
    HIGHLIGHTS_SUFFIX,
    highlights_path,
    load_highlights,
    save_highlights,
    select_highlights,
)
from .io_ffmpeg import AUDIO_EXTENSIONS, VIDEO_EXTENSIONS, ensure_dir, extract_audio
from .organizer import organize_project
from .selection import is_affirmative
from .state import FileSnapshot, Stage, StepDecision
from .stt import transcribe_to_srt

logger = logging.getLogger("reelcut")

Prompt = Callable[[str], str]

STEPS = (
    "extract",
    "transcribe",
    "analyze",
    "organize",
    "highlights",
    "cut-highlights",
    "approve-highlights",
    "assemble-full",
)
CLEAN_TYPES = ("upload", "output", "all")


@dataclass(frozen=True)
class ProcessingResult:
    name: str
    success: bool
    audio_path: str = ""
    srt_path: str = ""
    analysis_path: str = ""
    project_dir: str = ""
    error: str | None = None


def files_with_suffix(directory: Path, suffixes: tuple[str, ...]) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(
        p for p in directory.iterdir() if p.is_file() and p.name.lower().endswith(suffixes)
    )


class Agent:
    def __init__(
        self, settings: Settings, prompt: Prompt | None = None, client: OpenAI | None = None
    ):
        self.settings = settings
        self.prompt = prompt
        self._client = client

    # --- helpers ---------------------------------------------------------

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.settings.openai_api_key:
                raise RuntimeError("OPENAI_API_KEY is not set. Put it in .env or environment.")
            self._client = OpenAI(api_key=self.settings.openai_api_key)
        return self._client

    def snapshot(self) -> FileSnapshot:
        s = self.settings
        return FileSnapshot.from_dirs(s.upload_dir, s.separated_dir, s.ready_dir)

    def ask_yes_no(self, question: str) -> bool:
        if self.prompt is None:
            return False
        return is_affirmative(self.prompt(question))

    def gate(self, name: str, output_exists: bool, what: str) -> bool:
        """Apply the skip/overwrite policy; True means the item should run."""
        confirm = None
        if self.prompt is not None:
            question = f"{what} for {name} already exists. Overwrite? (y/n): "
            confirm = lambda: self.ask_yes_no(question)  # noqa: E731
        decision = state.decide(output_exists, confirm)
        if decision is StepDecision.SKIP:
            logger.info("Skipped %s - %s already exists", name, what)
            return False
        if decision is StepDecision.OVERWRITE:
            logger.info("Overwriting %s for %s", what, name)
        return True

    def stage_done(self, name: str, stage: Stage) -> bool:
        return state.has_output(name, stage, self.snapshot())

    # --- single items ----------------------------------------------------

    def extract_one(self, video: Path) -> Path | None:
        name = video.stem
        audio = self.settings.separated_dir / f"{name}.mp3"
        if not self.gate(name, self.stage_done(name, Stage.AUDIO_EXTRACTED), "extracted audio"):
            return None
        ensure_dir(self.settings.separated_dir)
        logger.info("Processing: %s", video.name)
        extract_audio(video, audio, bitrate=self.settings.audio_bitrate)
        shutil.copy2(video, self.settings.separated_dir / video.name)
        logger.info("Extracted audio from %s -> %s", video.name, audio.name)
        return audio

    def transcribe_one(self, audio: Path) -> Path | None:
        name = audio.stem
        srt = self.settings.separated_dir / f"{name}.srt"
        if not self.gate(name, self.stage_done(name, Stage.TRANSCRIBED), "SRT file"):
            return None
        client = self.client if self.settings.stt_backend == "openai" else None
        transcribe_to_srt(audio, srt, self.settings, client=client)
        return srt

    def analyze_one(self, srt: Path) -> Path | None:
        name = srt.stem
        out = self.settings.separated_dir / f"{name}_analysis.json"
        if not self.gate(name, self.stage_done(name, Stage.ANALYZED), "analysis"):
            return None
        result = analyze_captions(self.client, srt.read_text(encoding="utf-8"), name, self.settings)
        save_analysis(result, out)
        return out

    def organize_one(self, video: Path) -> Path | None:
        name = video.stem
        sep = self.settings.separated_dir
        audio = next((a for a in files_with_suffix(sep, AUDIO_EXTENSIONS) if a.stem == name), None)
        srt = sep / f"{name}.srt"
        if audio is None or not srt.is_file():
            logger.info("Skipped %s - matching audio or SRT file is missing", name)
            return None
        if not self.gate(name, self.stage_done(name, Stage.ORGANIZED), "organized project"):
            return None
        return organize_project(video, audio, srt, self.settings, client=self.client)

    def select_one(self, srt: Path) -> Path | None:
        name = srt.stem
        out = highlights_path(self.settings.separated_dir, name)
        if not self.gate(name, self.stage_done(name, Stage.HIGHLIGHTS_SELECTED), "highlights"):
            return None
        result = select_highlights(srt, self.prompt)
        if result is None:
            return None
        save_highlights(result, out)
        return out

    def cut_one(self, highlights_file: Path) -> Path | None:
        highlights = load_highlights(highlights_file)
        if highlights is None:
            logger.info("Skipped %s - could not be loaded", highlights_file.name)
            return None
        name = highlights.source_name
        video = find_original_video(self.settings.separated_dir, name)
        if video is None:
            logger.info("Skipped %s - no matching video file", name)
            return None
        if not self.gate(name, self.stage_done(name, Stage.CUT), "cut clips"):
            return None
        output_dir = self.settings.ready_dir / state.cut_folder_name(name)
        clips = cut_highlights(video, highlights, output_dir, self.settings.profile)
        logger.info("Cut %d clip(s) for %s", len(clips), name)
        return output_dir

    def approve_one(self, folder: Path) -> Path | None:
        metadata = load_clips_metadata(folder)
        if metadata is None:
            logger.info("Skipped %s - no clip metadata", folder.name)
            return None
        out = approved_path(folder)
        if not self.gate(metadata.source_name, out.is_file(), "approved highlights"):
            return None
        result = select_approved(folder, metadata, self.prompt)
        if result is None:
            return None
        save_approved(result, out)
        return out

    def assemble_one(self, folder: Path, intro: Path | None):
        approved = load_approved(approved_path(folder))
        if approved is None:
            logger.info("Skipped %s - no approved highlights", folder.name)
            return None
        name = approved.source_name
        original = find_original_video(self.settings.separated_dir, name)
        if original is None:
            logger.info("Skipped %s - original video not found", name)
            return None
        output_dir = folder / COMPLETE_DIRNAME
        done = complete_metadata_path(output_dir, name).is_file()
        if not self.gate(name, done, "assembled video"):
            return None
        result = assemble_full_video(
            approved, original, output_dir, intro=intro, profile=self.settings.profile
        )
        logger.info("Full video created: %s", Path(result.output_path).name)
        logger.info("  Highlight clips: %d", result.clips_count)
        if result.intro_duration:
            logger.info("  Intro duration: %s", result.intro_duration)
        logger.info("  Highlights duration: %s", result.clips_duration)
        logger.info("  Original duration: %s", result.original_duration)
        logger.info("  Total: %s", result.total_duration)
        return result

    # --- steps -----------------------------------------------------------

    def run_step(self, step: str):
        logger.info("Running step: %s", step)
        handlers = {
            "extract": self.run_extract_step,
            "transcribe": self.run_transcribe_step,
            "analyze": self.run_analyze_step,
            "organize": self.run_organize_step,
            "highlights": self.run_highlights_step,
            "cut-highlights": self.run_cut_step,
            "approve-highlights": self.run_approve_step,
            "assemble-full": self.run_assemble_step,
        }
        if step not in handlers:
            raise ValueError(f"Unknown step: {step}")
        return handlers[step]()

    def _inputs(self, directory: Path, suffixes: tuple[str, ...], step: str) -> list[Path]:
        files = files_with_suffix(directory, suffixes)
        if not files:
            logger.info("Nothing to do for %s: no input files in %s/", step, directory.name)
        else:
            logger.info("Found %d file(s) in %s", len(files), directory.name)
        return files

    def run_extract_step(self):
        videos = self._inputs(self.settings.upload_dir, VIDEO_EXTENSIONS, "extract")
        return run_sequential(videos, self.extract_one, desc="Extract", label=lambda p: p.name)

    def run_transcribe_step(self):
        audio = self._inputs(self.settings.separated_dir, AUDIO_EXTENSIONS, "transcribe")
        return run_sequential(audio, self.transcribe_one, desc="Transcribe", label=lambda p: p.name)

    def run_analyze_step(self):
        srts = self._inputs(self.settings.separated_dir, (".srt",), "analyze")
        return run_sequential(srts, self.analyze_one, desc="Analyze", label=lambda p: p.name)

    def run_organize_step(self):
        videos = self._inputs(self.settings.separated_dir, VIDEO_EXTENSIONS, "organize")
        return run_sequential(videos, self.organize_one, desc="Organize", label=lambda p: p.name)

    def run_highlights_step(self):
        if self.prompt is None:
            logger.error("Highlight selection needs an interactive prompt")
            return []
        srts = self._inputs(self.settings.separated_dir, (".srt",), "highlights")
        return run_sequential(srts, self.select_one, desc="Select highlights", label=lambda p: p.name)

    def run_cut_step(self):
        files = self._inputs(self.settings.separated_dir, (HIGHLIGHTS_SUFFIX,), "cut-highlights")
        return run_sequential(files, self.cut_one, desc="Cut highlights", label=lambda p: p.name)

    def run_approve_step(self):
        if self.prompt is None:
            logger.error("Highlight approval needs an interactive prompt")
            return []
        folders = find_highlight_folders(self.settings.ready_dir)
        if not folders:
            logger.info("No highlight folders in ready-video/ - run 'cut-highlights' first")
        return run_sequential(
            folders, self.approve_one, desc="Approve highlights", label=lambda p: p.name
        )

    def run_assemble_step(self):
        folders = find_approved(self.settings.ready_dir)
        if not folders:
            logger.info("No approved highlights in ready-video/ - run 'approve-highlights' first")
            return []

        intro = find_intro(self.settings.intro_dir)
        if intro is not None:
            logger.info("Found intro: %s", intro.name)
            if self.ask_yes_no("Add the intro after the highlights? (y/n): "):
                logger.info("Intro will follow the highlights")
            else:
                logger.info("Intro skipped")
                intro = None

        return run_sequential(
            folders, lambda folder: self.assemble_one(folder, intro), desc="Assemble", label=lambda p: p.name
        )

    # --- whole pipeline --------------------------------------------------

    def process_video(self, video: Path) -> ProcessingResult:
        """extract -> transcribe -> analyze -> organize for one upload."""
        name = video.stem
        sep = self.settings.separated_dir
        audio = sep / f"{name}.mp3"
        srt = sep / f"{name}.srt"
        analysis = sep / f"{name}_analysis.json"

        self.extract_one(video)
        self.transcribe_one(audio)
        self.analyze_one(srt)
        project = self.organize_one(sep / video.name)
        return ProcessingResult(
            name=name,
            success=True,
            audio_path=str(audio),
            srt_path=str(srt),
            analysis_path=str(analysis),
            project_dir=str(project or ""),
        )

    def process_all(self) -> list[ProcessingResult]:
        videos = files_with_suffix(self.settings.upload_dir, VIDEO_EXTENSIONS)
        if not videos:
            logger.info("No video files found in upload directory")
            return []
        logger.info("Found %d video file(s)", len(videos))

        outcomes = run_sequential(videos, self.process_video, desc="Process", label=lambda p: p.name)
        results = [
            o.value if o.ok else ProcessingResult(name=o.item.stem, success=False, error=str(o.error))
            for o in outcomes
        ]
        ok = sum(1 for r in results if r.success)
        logger.info("Summary: %d succeeded, %d failed", ok, len(results) - ok)
        return results

    def status(self) -> dict[str, Stage | None]:
        snap = self.snapshot()
        return {name: state.infer_state(name, snap) for name in state.known_names(snap)}

    def clean(self, kind: str) -> dict[str, int]:
        """Empty the folders named by ``kind``; returns removed entries per folder."""
        s = self.settings
        targets = {
            "upload": [s.upload_dir],
            "output": [s.separated_dir, s.ready_dir],
            "all": [s.upload_dir, s.separated_dir, s.ready_dir],
        }
        if kind not in targets:
            raise ValueError(f"Unknown clean type: {kind}")

        removed: dict[str, int] = {}
        for directory in targets[kind]:
            if not directory.is_dir():
                logger.info("Folder %s/ does not exist", directory.name)
                continue
            count = 0
            for entry in directory.iterdir():
                if entry.is_dir():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
                count += 1
            removed[directory.name] = count
            logger.info("Cleaned %s/ (%d entries)", directory.name, count)
        return removed
