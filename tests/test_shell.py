"""Tests for the shell loop and builtins."""

import io
import os
import subprocess

import pytest

from pinashell import logs
from pinashell.config import PinaShellConfig
from pinashell.launcher import ProcessLauncher
from pinashell.shell import PinaShell
from pinashell.terminal import Terminal
from pinashell.tts import SpeechDispatcher


class RecordingLauncher(ProcessLauncher):
    """Launcher that records requests without spawning anything."""

    def __init__(self, speaker) -> None:
        super().__init__(speaker, display=io.StringIO())
        self.calls = []
        self.raise_once = None

    def launch(self, tokens, capture=True, command_line=None) -> int:
        if self.raise_once is not None:
            error, self.raise_once = self.raise_once, None
            raise error
        self.calls.append((tokens, capture, command_line))
        return 0


@pytest.fixture
def config() -> PinaShellConfig:
    return PinaShellConfig(speech_enabled=False)


def make_shell(config, speaker, make_terminal, keys: str, launcher=None) -> PinaShell:
    return PinaShell(config, speaker=speaker, terminal=make_terminal(keys), launcher=launcher)


class TestEndToEnd:
    """Runs typed input through the real launcher and /bin/sh."""

    def test_echo_hi(self, config, speaker, make_terminal) -> None:
        shell = make_shell(config, speaker, make_terminal, "echo hi\n")
        assert shell.run() == 0
        assert "stdout: \nhi newline " in speaker.spoken
        assert shell.history.entries()[0] == "echo hi"
        assert shell.last_status == 0

    def test_narration_order(self, config, speaker, make_terminal) -> None:
        shell = make_shell(config, speaker, make_terminal, "echo hi\n")
        shell.run()
        assert speaker.spoken[:2] == ["Pina shell is ready.", "Next command!"]
        typed_end = speaker.spoken.index("echo hi")
        assert speaker.spoken[typed_end + 1] == "stdout: \nhi newline "
        assert speaker.spoken[-1] == "Next command!"

    def test_invalid_input_byte_keeps_shell_running(self, config, speaker) -> None:
        terminal = Terminal(stdin=io.TextIOWrapper(io.BytesIO(b"l\xe9s\necho ok\n")), stdout=io.StringIO())
        shell = PinaShell(config, speaker=speaker, terminal=terminal)
        assert shell.run() == 0
        assert shell.history.entries() == ["echo ok", "l\ufffds"]
        assert "stdout: \nok newline " in speaker.spoken

    def test_history_listing_printed(self, config, speaker, make_terminal) -> None:
        shell = make_shell(config, speaker, make_terminal, "echo one\necho two\n")
        shell.run()
        output = shell.terminal.stdout.getvalue()
        assert "Command history:\n  0 : echo two\n  1 : echo one\n" in output


class TestDispatch:
    """Tests for blank lines, builtins and launcher dispatch."""

    @pytest.fixture
    def launcher(self, speaker) -> RecordingLauncher:
        return RecordingLauncher(speaker)

    def test_blank_line_not_executed(self, config, speaker, make_terminal, launcher) -> None:
        shell = make_shell(config, speaker, make_terminal, "   \n\n", launcher)
        shell.run()
        assert launcher.calls == []
        assert speaker.spoken.count("No command to execute.") == 2
        assert len(shell.history) == 0

    def test_execute_empty_tokens(self, config, speaker, make_terminal, launcher) -> None:
        shell = make_shell(config, speaker, make_terminal, "", launcher)
        assert shell.execute([]) is True
        assert launcher.calls == []

    def test_line_passed_with_tokens(self, config, speaker, make_terminal, launcher) -> None:
        shell = make_shell(config, speaker, make_terminal, 'grep "a b" file\n', launcher)
        shell.run()
        assert launcher.calls == [(["grep", "a b", "file"], True, 'grep "a b" file')]

    def test_capture_follows_config(self, speaker, make_terminal, launcher) -> None:
        config = PinaShellConfig(speech_enabled=False, capture_output=False)
        shell = make_shell(config, speaker, make_terminal, "vim\n", launcher)
        shell.run()
        assert launcher.calls[0][1] is False

    def test_exit_stops_loop(self, config, speaker, make_terminal, launcher) -> None:
        shell = make_shell(config, speaker, make_terminal, "exit\necho never\n", launcher)
        assert shell.run() == 0
        assert launcher.calls == []
        assert shell.history.entries() == ["exit"]

    def test_history_capped(self, speaker, make_terminal, launcher) -> None:
        config = PinaShellConfig(speech_enabled=False, history_size=2)
        shell = make_shell(config, speaker, make_terminal, "a\nb\nc\n", launcher)
        shell.run()
        assert shell.history.entries() == ["c", "b"]

    def test_interrupt_keeps_shell_running(self, config, speaker, make_terminal, launcher) -> None:
        launcher.raise_once = KeyboardInterrupt()
        shell = make_shell(config, speaker, make_terminal, "sleep 9\necho next\n", launcher)
        assert shell.run() == 0
        assert "Interrupted" in speaker.spoken
        assert launcher.calls == [(["echo", "next"], True, "echo next")]


class TestBuiltins:
    """Tests for cd and help."""

    def test_cd_without_argument(self, config, speaker, make_terminal, capsys) -> None:
        shell = make_shell(config, speaker, make_terminal, "")
        assert shell.execute(["cd"]) is True
        assert "pina_shell: expected argument to cd" in speaker.spoken
        assert 'expected argument to "cd"' in capsys.readouterr().err

    def test_cd_changes_directory(self, config, speaker, make_terminal, tmp_path) -> None:
        target = tmp_path / "sub"
        target.mkdir()
        shell = make_shell(config, speaker, make_terminal, "")
        shell.execute(["cd", str(target)])
        assert os.path.realpath(os.getcwd()) == os.path.realpath(target)

    def test_cd_missing_directory(self, config, speaker, make_terminal, tmp_path) -> None:
        shell = make_shell(config, speaker, make_terminal, "")
        assert shell.execute(["cd", str(tmp_path / "nope")]) is True
        assert any("No such file or directory" in text for text in speaker.spoken)

    def test_help_lists_builtins(self, config, speaker, make_terminal) -> None:
        shell = make_shell(config, speaker, make_terminal, "")
        shell.execute(["help"])
        output = shell.terminal.stdout.getvalue()
        for name in ("cd", "help", "exit"):
            assert f"  {name}\n" in output


class TestShutdownLog:
    """Tests for the summary logged when the loop ends."""

    def test_logs_narration_counts(self, config, make_terminal, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        monkeypatch.setattr(subprocess, "run", lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 0))
        log_file = tmp_path / "shell.log"
        logs.setup_logging(str(log_file))
        try:
            speaker = SpeechDispatcher(engine="espeak-ng", enabled=True)
            shell = PinaShell(config, speaker=speaker, terminal=make_terminal(""))
            shell.run()
        finally:
            logs.reset_logging()
        # "Pina shell is ready." and "Next command!"
        assert "Shell loop finished: 2 narrations, 0 speech failures" in log_file.read_text()
