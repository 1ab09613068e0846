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

"""Raw-mode line editor that speaks every keystroke, finished word, and editing action."""

from enum import Enum
from typing import List, Optional

from .history import HistoryCursor, HistoryStore
from .logs import log_message
from .patterns import WORD_SEPARATORS
from .terminal import Terminal
from .tts import SpeechDispatcher

# Constants
LINE_BUFFER_INCREMENT = 1024
REDRAW_PADDING = 60

# Key codes
ESC = '\x1b'
BRACKET = '['
KEY_UP = 'A'
KEY_DOWN = 'B'
BACKSPACE_KEYS = ('\b', '\x7f')
NEWLINE_KEYS = ('\n', '\r')

# Spoken feedback
SAY_SPACE = "space"
SAY_TAB = "tab"
SAY_BACKSPACE = "backspace"
SAY_EMPTY_LINE = "Empty line"
SAY_UP_ARROW = "up arrow"
SAY_DOWN_ARROW = "down arrow"
SAY_END_LIST = "end list"
SAY_BEGIN_LIST = "begin list"


class EditorState(Enum):
    READING = "reading"
    ESCAPE_SEEN = "escape_seen"
    BRACKET_SEEN = "bracket_seen"
    LINE_COMPLETE = "line_complete"
    END_OF_INPUT = "end_of_input"


TERMINAL_STATES = (EditorState.LINE_COMPLETE, EditorState.END_OF_INPUT)


class LineBuffer:
    """Append-only character buffer whose capacity grows in fixed increments."""

    def __init__(self, increment: int = LINE_BUFFER_INCREMENT):
        self.increment = increment
        self.capacity = increment
        self._chars: List[str] = []

    def __len__(self) -> int:
        return len(self._chars)

    def _grow(self) -> None:
        """Extend the capacity bookkeeping by one increment.

        The list allocates on demand, so capacity only records the growth steps.
        This is the single place a buffer growth happens; a MemoryError raised
        from it propagates out of read_line and ends the shell.
        """
        self.capacity += self.increment

    def append(self, ch: str) -> None:
        self._chars.append(ch)
        if len(self._chars) >= self.capacity:
            self._grow()

    def pop(self) -> str:
        return self._chars.pop()

    def last(self) -> Optional[str]:
        return self._chars[-1] if self._chars else None

    def replace(self, text: str) -> None:
        """Overwrite the whole content; the logical length becomes len(text)."""
        while len(text) >= self.capacity:
            self._grow()
        self._chars = list(text)

    def last_word(self) -> str:
        """The word that ends just before the final character (the one just typed)."""
        end = len(self._chars) - 1
        start = end
        while start > 0 and self._chars[start - 1] not in WORD_SEPARATORS:
            start -= 1
        return ''.join(self._chars[start:end])

    def text(self) -> str:
        return ''.join(self._chars)


class LineEditor:
    """Reads one line at a time in raw mode, narrating as the user types.

    Arrow up/down walk the history; the first up-arrow of a line shows the most
    recent entry, and down-arrow does nothing until up-arrow has been used.
    """

    def __init__(self, history: HistoryStore, speaker: SpeechDispatcher, terminal: Terminal,
                 prompt: str = "pina_shell> ", buffer_increment: int = LINE_BUFFER_INCREMENT):
        self.history = history
        self.speaker = speaker
        self.terminal = terminal
        self.prompt = prompt
        self.buffer_increment = buffer_increment
        self.cursor = HistoryCursor(history)
        self.buffer = LineBuffer(self.buffer_increment)
        self.state = EditorState.READING
        self.history_entered = False

    def reset(self) -> None:
        self.buffer = LineBuffer(self.buffer_increment)
        self.cursor.reset()
        self.state = EditorState.READING
        self.history_entered = False

    def read_line(self) -> Optional[str]:
        """Return the finished line, or None at end of input."""
        self.reset()
        with self.terminal.raw_mode():
            while self.state not in TERMINAL_STATES:
                self.feed(self.terminal.read_char())

        if self.state is EditorState.END_OF_INPUT:
            log_message("INFO", "End of input")
            return None
        return self.buffer.text()

    def feed(self, ch: str) -> EditorState:
        """Advance the state machine by one input character."""
        if ch == '':
            self.state = EditorState.END_OF_INPUT
        elif self.state is EditorState.ESCAPE_SEEN:
            self._on_escape_seen(ch)
        elif self.state is EditorState.BRACKET_SEEN:
            self._on_bracket_seen(ch)
        elif self.state is EditorState.READING:
            self._on_reading(ch)
        return self.state

    # Reading

    def _on_reading(self, ch: str) -> None:
        if ch in NEWLINE_KEYS:
            self.terminal.write('\n')
            self.state = EditorState.LINE_COMPLETE
        elif ch == ' ':
            self._on_space()
        elif ch == '\t':
            self.buffer.append(ch)
            self.terminal.write(ch)
            self.speaker.speak(SAY_TAB)
        elif ch in BACKSPACE_KEYS:
            self._on_backspace()
        elif ch == ESC:
            self.state = EditorState.ESCAPE_SEEN
        elif ch.isprintable():
            self.buffer.append(ch)
            self.terminal.write(ch)
            self.speaker.speak_char(ch)
        else:
            log_message("DEBUG", f"Ignoring control character {ch!r}")

    def _on_space(self) -> None:
        previous = self.buffer.last()
        self.buffer.append(' ')
        self.terminal.write(' ')
        self.speaker.speak(SAY_SPACE)

        if previous is not None and previous not in WORD_SEPARATORS:
            word = self.buffer.last_word()
            if word:
                self.speaker.speak(word)

    def _on_backspace(self) -> None:
        self.speaker.speak(SAY_BACKSPACE)

        if not len(self.buffer):
            self.speaker.speak(SAY_EMPTY_LINE)
            return

        removed = self.buffer.pop()
        if removed == '\t':
            self.speaker.speak(SAY_TAB)
            # A tab covers a variable number of columns, so redraw the whole line
            self.terminal.write(f"\r{' ' * (len(self.prompt) + len(self.buffer) + 8)}\r{self.prompt}{self.buffer.text()}")
        else:
            if removed == ' ':
                self.speaker.speak(SAY_SPACE)
            else:
                self.speaker.speak_char(removed)
            self.terminal.write('\b \b')

    # Escape sequences

    def _on_escape_seen(self, ch: str) -> None:
        if ch == BRACKET:
            self.state = EditorState.BRACKET_SEEN
            return
        log_message("DEBUG", f"Escape followed by {ch!r}, passing through")
        self.terminal.write(ch)
        self.state = EditorState.READING

    def _on_bracket_seen(self, ch: str) -> None:
        self.state = EditorState.READING
        if ch == KEY_UP:
            self._on_up_arrow()
        elif ch == KEY_DOWN:
            self._on_down_arrow()
        else:
            log_message("DEBUG", f"Unhandled escape sequence ESC [ {ch!r}")
            self.terminal.write(ch)

    def _on_up_arrow(self) -> None:
        self.speaker.speak(SAY_UP_ARROW)
        self.history_entered = True

        result = self.cursor.older()
        if not result.moved:
            self.speaker.speak(SAY_END_LIST)
            return
        self._show_history_entry()

    def _on_down_arrow(self) -> None:
        self.speaker.speak(SAY_DOWN_ARROW)
        if not self.history_entered:
            return

        result = self.cursor.newer()
        if not result.moved:
            self.speaker.speak(SAY_BEGIN_LIST)
            return
        self._show_history_entry()

    def _show_history_entry(self) -> None:
        entry = self.cursor.text()
        self.redraw(entry)
        self.buffer.replace(entry)
        self.speaker.speak(entry)

    def redraw(self, text: str) -> None:
        """Blank out the current display line, then print the prompt and text."""
        width = len(self.prompt) + len(self.buffer) + REDRAW_PADDING
        self.terminal.write(f"\r{' ' * width}\r{self.prompt}{text}")
