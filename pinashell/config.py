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
config.py - Centralized configuration management for pinashell
Single source of truth for all configuration values
"""

import os
from typing import Optional, Dict, Any
from dataclasses import dataclass

from dotenv import load_dotenv

from .logs import log_message

DEFAULT_PROMPT = "pina_shell> "
DEFAULT_SPEECH_ENGINE = "espeak-ng"
DEFAULT_SHELL = "/bin/sh"
DEFAULT_HISTORY_SIZE = 15

SPEECH_ENGINE_CHOICES = ['auto', 'espeak-ng', 'espeak', 'say', 'festival', 'flite', 'off']


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        log_message("WARNING", f"Ignoring invalid integer {name}={value!r}, using {default}")
        return default


@dataclass
class PinaShellConfig:
    """Centralized configuration for all pinashell components"""

    # Core settings
    log_file: Optional[str] = None
    verbosity: int = 0
    prompt: str = DEFAULT_PROMPT

    # Speech settings
    speech_enabled: bool = True
    speech_engine: str = DEFAULT_SPEECH_ENGINE
    speech_failures_fatal: bool = False

    # Command execution
    shell: str = DEFAULT_SHELL
    capture_output: bool = True

    # History
    history_size: int = DEFAULT_HISTORY_SIZE

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Reject settings the shell cannot run with."""
        if self.history_size < 1:
            raise ValueError(f"history_size must be at least 1, got {self.history_size}")
        if self.speech_engine not in SPEECH_ENGINE_CHOICES:
            raise ValueError(f"Unknown speech engine {self.speech_engine!r}; choose one of {', '.join(SPEECH_ENGINE_CHOICES)}")

    @classmethod
    def from_env(cls) -> 'PinaShellConfig':
        """Create configuration from environment variables"""
        # .env takes precedence, .pinashell.env never overrides what is already set
        load_dotenv()
        load_dotenv('.pinashell.env')

        return cls(
            log_file=os.environ.get('PINA_SHELL_LOG_FILE'),
            verbosity=_env_int('PINA_SHELL_VERBOSITY', 0),
            prompt=os.environ.get('PINA_SHELL_PROMPT', DEFAULT_PROMPT),
            speech_enabled=_env_flag('PINA_SHELL_SPEECH_ENABLED', True),
            speech_engine=os.environ.get('PINA_SHELL_SPEECH_ENGINE', DEFAULT_SPEECH_ENGINE),
            speech_failures_fatal=_env_flag('PINA_SHELL_SPEECH_FAILURES_FATAL', False),
            shell=os.environ.get('PINA_SHELL_SHELL', DEFAULT_SHELL),
            capture_output=_env_flag('PINA_SHELL_CAPTURE_OUTPUT', True),
            history_size=_env_int('PINA_SHELL_HISTORY_SIZE', DEFAULT_HISTORY_SIZE),
        )

    def merge_with_args(self, args: Any) -> None:
        """Merge command-line arguments with configuration"""
        if hasattr(args, 'log_file') and args.log_file:
            self.log_file = args.log_file

        if hasattr(args, 'verbose') and args.verbose:
            self.verbosity = args.verbose

        if hasattr(args, 'prompt') and args.prompt is not None:
            self.prompt = args.prompt

        if hasattr(args, 'speech_engine') and args.speech_engine:
            self.speech_engine = args.speech_engine

        if hasattr(args, 'disable_speech') and args.disable_speech:
            self.speech_enabled = False

        if hasattr(args, 'speech_failures_fatal') and args.speech_failures_fatal:
            self.speech_failures_fatal = True

        if hasattr(args, 'shell') and args.shell:
            self.shell = args.shell

        if hasattr(args, 'history_size') and args.history_size is not None:
            self.history_size = args.history_size

        if hasattr(args, 'no_capture') and args.no_capture:
            self.capture_output = False

        self.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            k: v for k, v in self.__dict__.items()
            if not k.startswith('_')
        }


# Global configuration instance
_config: Optional[PinaShellConfig] = None


def get_config() -> PinaShellConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = PinaShellConfig.from_env()
    return _config


def reload_config() -> PinaShellConfig:
    """Reload configuration from environment"""
    global _config
    _config = PinaShellConfig.from_env()
    return _config


def set_config(config: PinaShellConfig) -> None:
    """Set the global configuration instance"""
    global _config
    _config = config
