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

"""pinashell CLI - Command-line entry point for the speaking shell"""

import argparse
import signal
import sys
from typing import List, Optional

from . import __version__
from .config import SPEECH_ENGINE_CHOICES, PinaShellConfig, set_config
from .exceptions import LauncherFatalError, SpeechEngineError
from .logs import get_log_file, is_logging_enabled, log_message, setup_logging
from .shell import PinaShell
from .terminal import restore_active_terminal

# Check Python version
if sys.version_info < (3, 10):
    print("Error: Python 3.10 or higher required", file=sys.stderr)
    print("Your version:", sys.version, file=sys.stderr)
    sys.exit(1)

EXIT_FATAL = 1


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description='pinashell - A screen reader shell that speaks stdin, stdout and stderr',
        usage='%(prog)s [options]'
    )

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase verbosity (can be used multiple times: -v, -vv)')
    parser.add_argument('--prompt', type=str,
                        help='Prompt printed before each command (default: "pina_shell> ")')

    # Speech options
    speech_group = parser.add_argument_group('Speech options')
    speech_group.add_argument('--speech-engine', type=str, choices=SPEECH_ENGINE_CHOICES,
                              help='System TTS engine to narrate with (default: espeak-ng)')
    speech_group.add_argument('--disable-speech', action='store_true',
                              help='Do not start the speech engine at all')
    speech_group.add_argument('--speech-failures-fatal', action='store_true',
                              help='Exit when the speech engine cannot be started')

    # Execution options
    exec_group = parser.add_argument_group('Execution options')
    exec_group.add_argument('--shell', type=str, metavar='PATH',
                            help='Command interpreter used as "<shell> -c <line>" (default: /bin/sh)')
    exec_group.add_argument('--history-size', type=int, metavar='N',
                            help='Number of commands kept in history (default: 15)')
    exec_group.add_argument('--no-capture', action='store_true',
                            help='Let commands write to the terminal instead of capturing and narrating output')

    # Debug options
    debug_group = parser.add_argument_group('Debug options')
    debug_group.add_argument('--log-file', type=str, metavar='FILE',
                             help='Write a debug log to FILE')

    return parser.parse_args(argv)


def print_configuration_status(config: PinaShellConfig) -> None:
    """Show the effective configuration before the first prompt."""
    speech = config.speech_engine if config.speech_enabled else 'off'
    print(f"pinashell {__version__}")
    print(f"  Speech:  {speech}{' (failures fatal)' if config.speech_failures_fatal else ''}")
    print(f"  Shell:   {config.shell} -c")
    print(f"  History: {config.history_size} entries")
    print(f"  Capture: {'on' if config.capture_output else 'off'}")
    print(f"  Log:     {get_log_file() if is_logging_enabled() else 'off'}")


def signal_handler(signum, frame=None):
    """Restore the terminal before dying on SIGTERM/SIGHUP"""
    log_message("INFO", f"Received signal {signum} - restoring terminal")
    restore_active_terminal()
    sys.exit(128 + signum)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI"""
    signal.signal(signal.SIGTERM, signal_handler)
    if hasattr(signal, 'SIGHUP'):
        signal.signal(signal.SIGHUP, signal_handler)

    args = parse_arguments(argv)

    try:
        config = PinaShellConfig.from_env()
        config.merge_with_args(args)
    except ValueError as e:
        print(f"pina_shell: {e}", file=sys.stderr)
        return 2
    set_config(config)

    if config.log_file:
        setup_logging(config.log_file, mode='w')  # Use 'w' for fresh log on startup
    log_message("INFO", f"Starting pinashell with {config.to_dict()}")

    if config.verbosity > 0:
        print_configuration_status(config)

    shell = PinaShell(config)
    try:
        return shell.run()
    except MemoryError:
        restore_active_terminal()
        print("pina_shell: allocation error", file=sys.stderr)
        return EXIT_FATAL
    except (LauncherFatalError, SpeechEngineError) as e:
        restore_active_terminal()
        log_message("CRITICAL", f"pina_shell: {e}")
        return EXIT_FATAL


if __name__ == '__main__':
    sys.exit(main())
