import os

import pytest


@pytest.fixture
def clean_env(monkeypatch):
    """Isolated os.environ without any reelcut or OpenAI settings."""
    env = {k: v for k, v in os.environ.items() if not k.startswith(("REELCUT_", "OPENAI_"))}
    monkeypatch.setattr(os, "environ", env)
    return env
