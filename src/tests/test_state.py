"""
Tests for directory-derived pipeline state and the step gate.
"""

from reelcut.state import (
    FileSnapshot,
    Stage,
    StepDecision,
    cut_folder_name,
    decide,
    has_output,
    infer_state,
    is_cut_folder,
    known_names,
)

CUT = "talk_2025-01-31T12-00-00"


def _snap(upload=(), separated=(), ready=()):
    return FileSnapshot.from_mapping({"upload": upload, "separated": separated, "ready": ready})


def test_infer_state_progression():
    """Each stage's marker file moves the inferred state forward."""
    assert infer_state("talk", _snap()) is None
    assert infer_state("talk", _snap(upload=["talk.mov"])) is Stage.UPLOADED
    assert infer_state("talk", _snap(separated=["talk.mp3"])) is Stage.AUDIO_EXTRACTED
    assert infer_state("talk", _snap(separated=["talk.mp3", "talk.srt"])) is Stage.TRANSCRIBED
    assert infer_state("talk", _snap(separated=["talk.srt", "talk_analysis.json"])) is Stage.ANALYZED
    assert infer_state("talk", _snap(ready=["20250131_120000/talk.srt"])) is Stage.ORGANIZED
    assert infer_state("talk", _snap(separated=["talk_highlights.json"])) is Stage.HIGHLIGHTS_SELECTED
    assert infer_state("talk", _snap(ready=[f"{CUT}/highlights/highlights_metadata.json"])) is Stage.CUT
    assert (
        infer_state(
            "talk",
            _snap(
                ready=[
                    f"{CUT}/highlights/highlights_metadata.json",
                    f"{CUT}/highlights/approved_highlights.json",
                ]
            ),
        )
        is Stage.APPROVED
    )
    assert infer_state("talk", _snap(ready=[f"{CUT}/complete/talk_complete_metadata.json"])) is Stage.ASSEMBLED


def test_infer_state_ignores_other_names():
    snap = _snap(
        upload=["talk.mov"],
        separated=["talk2.srt", "other_highlights.json"],
        ready=["talk2_2025-01-31T12-00-00/highlights/highlights_metadata.json"],
    )
    assert infer_state("talk", snap) is Stage.UPLOADED
    assert infer_state("talk2", snap) is Stage.CUT


def test_has_output_ignores_nested_upload_files():
    assert not has_output("talk", Stage.UPLOADED, _snap(upload=["old/talk.mov"]))
    assert has_output("talk", Stage.UPLOADED, _snap(upload=["talk.MP4"]))


def test_cut_folder_names():
    name = cut_folder_name("talk")
    assert is_cut_folder(name, "talk")
    assert is_cut_folder(CUT, "talk")
    assert not is_cut_folder("talk", "talk")
    assert not is_cut_folder("talk_extra_2025-01-31T12-00-00", "talk")
    assert not is_cut_folder("20250131_120000", "talk")


def test_known_names():
    snap = _snap(upload=["a.mov", "notes.txt"], separated=["b.mp3", "b.srt", "a_analysis.json"])
    assert known_names(snap) == ["a", "b"]


def test_snapshot_from_dirs(tmp_path):
    (tmp_path / "upload").mkdir()
    (tmp_path / "upload" / "talk.mov").write_bytes(b"")
    (tmp_path / "ready" / CUT / "highlights").mkdir(parents=True)
    (tmp_path / "ready" / CUT / "highlights" / "highlights_metadata.json").write_text("{}", encoding="utf-8")

    snap = FileSnapshot.from_dirs(tmp_path / "upload", tmp_path / "missing", tmp_path / "ready")

    assert snap.upload == frozenset({"talk.mov"})
    assert snap.separated == frozenset()
    assert infer_state("talk", snap) is Stage.CUT


def test_decide_runs_when_output_missing():
    """The confirmation callback is never consulted for missing output."""
    asked = []
    assert decide(False, lambda: asked.append(1) or True) is StepDecision.RUN
    assert asked == []


def test_decide_skips_by_default():
    assert decide(True) is StepDecision.SKIP
    assert decide(True, lambda: False) is StepDecision.SKIP


def test_decide_overwrites_on_confirmation():
    assert decide(True, lambda: True) is StepDecision.OVERWRITE
