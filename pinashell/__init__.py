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

"""pinashell - A screen reader shell that narrates keystrokes, words, editing actions and command output."""

from .__version__ import __version__, __author__, __license__

# Speech API
from .tts import SpeechDispatcher, detect_speech_engine

# Editing and history
from .history import HistoryStore, HistoryCursor, NavigationResult, NavigationStatus
from .editor import LineEditor, LineBuffer, EditorState
from .terminal import Terminal

# Command execution
from .tokenizer import tokenize, is_blank
from .launcher import ProcessLauncher, CapturedOutput, to_speakable

# Configuration and errors
from .config import PinaShellConfig, get_config, set_config, reload_config
from .exceptions import PinaShellError, SpeechEngineError, LauncherFatalError

# High-level API
from .shell import PinaShell

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",

    # Speech
    "SpeechDispatcher",
    "detect_speech_engine",

    # Editing and history
    "HistoryStore",
    "HistoryCursor",
    "NavigationResult",
    "NavigationStatus",
    "LineEditor",
    "LineBuffer",
    "EditorState",
    "Terminal",

    # Command execution
    "tokenize",
    "is_blank",
    "ProcessLauncher",
    "CapturedOutput",
    "to_speakable",

    # Configuration and errors
    "PinaShellConfig",
    "get_config",
    "set_config",
    "reload_config",
    "PinaShellError",
    "SpeechEngineError",
    "LauncherFatalError",

    # High-level API
    "PinaShell",
]
