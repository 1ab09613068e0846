"""Commands handled inside the shell process itself (cd, help, exit)."""

import os
from typing import TYPE_CHECKING, Callable, Dict, List

if TYPE_CHECKING:
    from .shell import PinaShell

BuiltinHandler = Callable[['PinaShell', List[str]], bool]


def builtin_cd(shell: 'PinaShell', args: List[str]) -> bool:
    """Change directory; args[1] is the target."""
    if len(args) < 2:
        shell.report_error('pina_shell: expected argument to "cd"', spoken="pina_shell: expected argument to cd")
        return True

    try:
        os.chdir(os.path.expanduser(args[1]))
    except OSError as e:
        shell.report_error(f"pina_shell: {e.strerror}: {args[1]}")
    return True


def builtin_help(shell: 'PinaShell', args: List[str]) -> bool:
    lines = [
        "Joao Carvalho - pina_shell",
        "Stephen Brennan's LSH",
        "Type program names and arguments, and hit enter.",
        "The following are built in:",
    ]
    lines.extend(f"  {name}" for name in BUILTINS)
    lines.append("Use the man command for information on other programs.")
    shell.terminal.write("\n".join(lines) + "\n")
    return True


def builtin_exit(shell: 'PinaShell', args: List[str]) -> bool:
    return False


BUILTINS: Dict[str, BuiltinHandler] = {
    "cd": builtin_cd,
    "help": builtin_help,
    "exit": builtin_exit,
}
