#!/usr/bin/env python3

# pinashell - A screen reader shell that speaks stdin, stdout and stderr
# Copyright (C) 2025 Robert Macrae
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Speech dispatcher that narrates text synchronously through a system TTS engine."""

import shutil
import subprocess
from typing import List, Optional, Tuple

from .exceptions import SpeechEngineError
from .logs import log_message

# Engines probed by detect_speech_engine, in order of preference
SYSTEM_ENGINES = [
    ("espeak-ng", "espeak-ng"),  # Linux
    ("espeak", "espeak"),        # Linux
    ("say", "say"),              # macOS
    ("festival", "festival"),    # Linux
    ("flite", "flite"),          # Linux
]

# Engines that read the text from stdin rather than argv
STDIN_ENGINES = ("say", "festival", "flite")


def detect_speech_engine() -> str:
    """Detect system TTS engine (espeak-ng, espeak, say, festival, flite)."""
    for cmd, name in SYSTEM_ENGINES:
        if shutil.which(cmd):
            return name
    return "off"


def build_engine_command(engine: str, text: str) -> Tuple[List[str], Optional[bytes]]:
    """Return the argument vector for an engine plus the bytes to feed on stdin, if any.

    The text travels as its own argv element after "--", so quotes need no escaping
    and words such as "-la" are spoken instead of parsed as options. say reads
    stdin when given no message.
    """
    commands = {
        "espeak-ng": ["espeak-ng", "--punct", "--", text],
        "espeak": ["espeak", "--punct", "--", text],
        "say": ["say"],
        "festival": ["festival", "--tts"],
        "flite": ["flite", "-voice", "slt"],
    }

    cmd = commands.get(engine)
    if cmd is None:
        raise ValueError(f"Unsupported speech engine: {engine}")

    stdin_data = text.encode() if engine in STDIN_ENGINES else None
    return cmd, stdin_data


class SpeechDispatcher:
    """Synchronous narration: every call blocks until the engine process has exited."""

    def __init__(self, engine: str = "espeak-ng", enabled: bool = True, failures_fatal: bool = False):
        if engine == "auto":
            engine = detect_speech_engine()
            log_message("INFO", f"Auto-detected speech engine: {engine}")
        self.engine = engine
        self.enabled = enabled and engine != "off"
        self.failures_fatal = failures_fatal
        self.spoken_count = 0
        self.failed_count = 0

    @classmethod
    def from_config(cls, config) -> 'SpeechDispatcher':
        return cls(
            engine=config.speech_engine,
            enabled=config.speech_enabled,
            failures_fatal=config.speech_failures_fatal,
        )

    def speak(self, text: str) -> bool:
        """Narrate text and wait for completion, return True if the engine succeeded."""
        if not text:
            return True

        log_message("DEBUG", f"Narrating: {text!r}")
        if not self.enabled:
            return True

        cmd, stdin_data = build_engine_command(self.engine, text)
        # The engine must never read from the user's terminal
        stdin_kwargs = {"input": stdin_data} if stdin_data is not None else {"stdin": subprocess.DEVNULL}
        try:
            result = subprocess.run(
                cmd,
                **stdin_kwargs,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as e:
            self.failed_count += 1
            if self.failures_fatal:
                raise SpeechEngineError(f"Could not start speech engine {self.engine}: {e}") from e
            # Report once; a missing engine would otherwise flood every keystroke
            level = "ERROR" if self.failed_count == 1 else "DEBUG"
            log_message(level, f"pina_shell: speech engine {self.engine} failed to start: {e}")
            return False

        self.spoken_count += 1
        if result.returncode != 0:
            log_message("WARNING", f"{self.engine} exited with status {result.returncode}")
            return False
        return True

    def speak_char(self, char: str) -> bool:
        """Narrate a single character on its own."""
        return self.speak(char[:1])
