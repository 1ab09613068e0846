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

"""
launcher.py - Run command lines through the system shell and narrate what they print

Commands always go through `<shell> -c <line>` so redirection and pipes behave as
in any other shell. When capturing, stdout and stderr are drained completely,
echoed to the display, translated to a speakable form, and spoken in that order.
"""

import errno
import signal
import subprocess
import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from .exceptions import LauncherFatalError
from .logs import log_message
from .patterns import SPEAKABLE_WHITESPACE_NAMES, SPEAKABLE_WHITESPACE_PATTERN
from .tts import SpeechDispatcher

STDOUT_LABEL = "stdout:"
STDERR_LABEL = "stderr:"

# Exit statuses reported when no child ever ran
LAUNCH_FAILED = -1
EXEC_FAILED = 127

# Running out of descriptors means the capture pipes could not be created
PIPE_FAILURE_ERRNOS = (errno.EMFILE, errno.ENFILE)


def to_speakable(text: str, label: str) -> str:
    """Prefix with the stream label and spell out newlines, tabs and spaces.

    >>> to_speakable("a b\\tc\\n", "stdout:")
    'stdout: \\na space b tab c newline '
    """
    body = SPEAKABLE_WHITESPACE_PATTERN.sub(lambda m: SPEAKABLE_WHITESPACE_NAMES[m.group(0)], text)
    return f"{label} \n{body}"


@dataclass
class CapturedOutput:
    """Everything a captured child wrote, decoded, plus how it exited."""
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


class ProcessLauncher:
    """Launch one child at a time and block until it terminates."""

    def __init__(self, speaker: SpeechDispatcher, shell: str = "/bin/sh",
                 display: Optional[TextIO] = None):
        self.speaker = speaker
        self.shell = shell
        self.display = display if display is not None else sys.stdout
        self.last_capture: Optional[CapturedOutput] = None

    def build_command(self, tokens: List[str], command_line: Optional[str] = None) -> List[str]:
        command = command_line if command_line is not None else " ".join(tokens)
        return [self.shell, "-c", command]

    def launch(self, tokens: List[str], capture: bool = True, command_line: Optional[str] = None) -> int:
        """Run the command and return its exit status (negative when killed by a signal)."""
        if not tokens:
            return 0

        cmd = self.build_command(tokens, command_line)
        log_message("INFO", f"Launching {cmd!r} (capture={capture})")

        pipe = subprocess.PIPE if capture else None
        try:
            process = subprocess.Popen(cmd, stdout=pipe, stderr=pipe)
        except (FileNotFoundError, PermissionError) as e:
            log_message("ERROR", f"pina_shell: cannot execute {self.shell}: {e.strerror or e}")
            return EXEC_FAILED
        except OSError as e:
            if capture and e.errno in PIPE_FAILURE_ERRNOS:
                raise LauncherFatalError(f"pipe: {e.strerror or e}") from e
            log_message("ERROR", f"pina_shell: could not start command: {e.strerror or e}")
            return LAUNCH_FAILED

        if capture:
            output = self._collect(process)
            self.last_capture = output
            self._display(output)
            self.narrate(output)
            returncode = output.returncode
        else:
            returncode = self._wait(process)

        log_message("INFO", f"Command exited with status {returncode}")
        return returncode

    def _collect(self, process: subprocess.Popen) -> CapturedOutput:
        # communicate() drains both pipes together, so a chatty stderr cannot stall stdout
        try:
            stdout, stderr = process.communicate()
        except KeyboardInterrupt:
            self._interrupt(process)
            raise
        return CapturedOutput(
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
            returncode=process.returncode,
        )

    def _wait(self, process: subprocess.Popen) -> int:
        try:
            return process.wait()
        except KeyboardInterrupt:
            self._interrupt(process)
            raise

    @staticmethod
    def _interrupt(process: subprocess.Popen) -> None:
        """Make sure the child saw the interrupt, then reap it."""
        if process.poll() is None:
            try:
                process.send_signal(signal.SIGINT)
            except ProcessLookupError:
                pass
        process.wait()

    def _display(self, output: CapturedOutput) -> None:
        if output.stdout:
            self.display.write(f"{STDOUT_LABEL}\n{output.stdout}")
        if output.stderr:
            self.display.write(f"{STDERR_LABEL}\n{output.stderr}")
        self.display.flush()

    def narrate(self, output: CapturedOutput) -> None:
        """Speak stdout (always, so silence is audible) then stderr when there is any."""
        self.speaker.speak(to_speakable(output.stdout, STDOUT_LABEL))
        if output.stderr:
            self.speaker.speak(to_speakable(output.stderr, STDERR_LABEL))
