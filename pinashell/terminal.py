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

"""Terminal access for the line editor: single-character reads, echo, and raw mode."""

import codecs
import sys
import termios
from contextlib import contextmanager
from typing import List, Optional, TextIO

from .logs import log_message

# Saved attributes of whichever Terminal is currently in raw mode, for signal handlers
_active_terminal: Optional['Terminal'] = None


class Terminal:
    """Wraps stdin/stdout; raw mode disables canonical input and local echo."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self._original_attrs: Optional[List] = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def isatty(self) -> bool:
        try:
            return self.stdin.isatty()
        except (AttributeError, ValueError):
            return False

    def read_char(self) -> str:
        """Read one character; an empty string means end of input.

        The terminal delivers bytes. They are decoded as UTF-8 here, and a byte
        that is not valid UTF-8 becomes U+FFFD instead of ending the shell.
        """
        raw = getattr(self.stdin, "buffer", None)
        if raw is None:
            return self.stdin.read(1)

        while not self._pending:
            byte = raw.read(1)
            if not byte:
                # Flush an incomplete sequence left at end of input
                self._pending = self._decoder.decode(b"", final=True)
                self._decoder.reset()
                if not self._pending:
                    return ""
                break
            self._pending = self._decoder.decode(byte)

        ch, self._pending = self._pending[0], self._pending[1:]
        return ch

    def write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    @property
    def in_raw_mode(self) -> bool:
        return self._original_attrs is not None

    @contextmanager
    def raw_mode(self):
        """Disable line buffering and echo for the duration of the block.

        The saved attributes are reapplied on every exit path, exceptions included.
        """
        global _active_terminal

        if not self.isatty():
            yield self
            return

        fd = self.stdin.fileno()
        old_attrs = termios.tcgetattr(fd)
        new_attrs = termios.tcgetattr(fd)
        new_attrs[3] &= ~(termios.ICANON | termios.ECHO)
        new_attrs[6][termios.VMIN] = 1
        new_attrs[6][termios.VTIME] = 0

        self._original_attrs = old_attrs
        _active_terminal = self
        termios.tcsetattr(fd, termios.TCSANOW, new_attrs)
        try:
            yield self
        finally:
            self.restore()

    def restore(self) -> None:
        """Reapply the attributes saved when raw mode was entered, if any."""
        global _active_terminal

        if self._original_attrs is None:
            return
        attrs = self._original_attrs
        self._original_attrs = None
        if _active_terminal is self:
            _active_terminal = None
        try:
            termios.tcsetattr(self.stdin.fileno(), termios.TCSANOW, attrs)
        except (termios.error, OSError, ValueError) as e:
            log_message("ERROR", f"Failed to restore terminal attributes: {e}")


def restore_active_terminal() -> None:
    """Restore whichever terminal is in raw mode; used by signal handlers."""
    if _active_terminal is not None:
        _active_terminal.restore()
