"""Shared fixtures: a speaker that records instead of talking, and an in-memory terminal."""

import io
import os
from typing import List

import pytest

from pinashell.terminal import Terminal
from pinashell.tts import SpeechDispatcher


class RecordingSpeaker(SpeechDispatcher):
    """SpeechDispatcher that keeps every narration instead of running an engine."""

    def __init__(self) -> None:
        super().__init__(engine="off", enabled=False)
        self.spoken: List[str] = []

    def speak(self, text: str) -> bool:
        if text:
            self.spoken.append(text)
        return True


def _make_terminal(keys: str = "") -> Terminal:
    return Terminal(stdin=io.StringIO(keys), stdout=io.StringIO())


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep PINA_SHELL_* settings and stray .env files from leaking into tests."""
    for key in list(os.environ):
        if key.startswith("PINA_SHELL_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def speaker() -> RecordingSpeaker:
    return RecordingSpeaker()


@pytest.fixture
def make_terminal():
    """Factory for a Terminal fed from a string, with output captured in a StringIO."""
    return _make_terminal

