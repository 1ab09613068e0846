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

"""The read / remember / execute loop tying the editor, history and launcher together."""

from typing import List, Optional

from .builtins import BUILTINS
from .config import PinaShellConfig, get_config
from .editor import LineEditor
from .history import HistoryStore
from .launcher import ProcessLauncher
from .logs import log_message
from .terminal import Terminal
from .tokenizer import is_blank, tokenize
from .tts import SpeechDispatcher

SAY_READY = "Pina shell is ready."
SAY_NEXT_COMMAND = "Next command!"
SAY_NO_COMMAND = "No command to execute."
SAY_INTERRUPTED = "Interrupted"

HISTORY_HEADER = "Command history:"


class PinaShell:
    """Interactive shell that narrates input, history navigation, and command output."""

    def __init__(self, config: Optional[PinaShellConfig] = None,
                 speaker: Optional[SpeechDispatcher] = None,
                 terminal: Optional[Terminal] = None,
                 launcher: Optional[ProcessLauncher] = None,
                 history: Optional[HistoryStore] = None):
        self.config = config or get_config()
        self.speaker = speaker or SpeechDispatcher.from_config(self.config)
        self.terminal = terminal or Terminal()
        self.history = history or HistoryStore(self.config.history_size)
        self.launcher = launcher or ProcessLauncher(self.speaker, shell=self.config.shell,
                                                    display=self.terminal.stdout)
        self.editor = LineEditor(self.history, self.speaker, self.terminal, prompt=self.config.prompt)
        self.last_status = 0

    def run(self) -> int:
        """Loop until exit or end of input; returns the process exit code."""
        self.speaker.speak(SAY_READY)

        while True:
            try:
                if not self.step():
                    break
            except KeyboardInterrupt:
                log_message("INFO", "Interrupted by user")
                self.terminal.write("\n")
                self.speaker.speak(SAY_INTERRUPTED)

        log_message("INFO", f"Shell loop finished: {self.speaker.spoken_count} narrations, "
                            f"{self.speaker.failed_count} speech failures")
        return 0

    def step(self) -> bool:
        """Prompt, read and execute one line. False means the shell should stop."""
        self.terminal.write(self.config.prompt)
        self.speaker.speak(SAY_NEXT_COMMAND)

        line = self.editor.read_line()
        if line is None:
            return False

        if is_blank(line):
            self.speaker.speak(SAY_NO_COMMAND)
            return True

        self.speaker.speak(line)
        self.remember(line)
        return self.execute(tokenize(line), line)

    def remember(self, line: str) -> None:
        self.history.push_front(line)
        listing = "\n".join(self.history.format_listing())
        self.terminal.write(f"\n{HISTORY_HEADER}\n{listing}\n")

    def execute(self, tokens: List[str], line: Optional[str] = None) -> bool:
        """Dispatch to a builtin or launch through the system shell."""
        if not tokens:
            return True

        handler = BUILTINS.get(tokens[0])
        if handler is not None:
            log_message("DEBUG", f"Running builtin {tokens[0]}")
            return handler(self, tokens)

        self.last_status = self.launcher.launch(tokens, capture=self.config.capture_output, command_line=line)
        return True

    def report_error(self, message: str, spoken: Optional[str] = None) -> None:
        """Show an error to the user and speak it."""
        log_message("ERROR", message)
        self.speaker.speak(spoken or message)
