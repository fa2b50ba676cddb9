"""
reelcut - highlight pipeline for turning raw uploads into social-media deliverables.

A staged, file-backed pipeline for:
- Extracting audio from uploaded videos
- Transcribing speech into SRT captions (OpenAI Whisper or local faster-whisper)
- Summarizing transcripts and writing per-platform copy with GPT
- Selecting highlight captions and cutting them into HDR clips
- Approving and ordering clips, then assembling the final video
"""

__version__ = "0.1.0"
