"""Tests for process launching, output capture and speakable translation."""

import errno
import io
import subprocess

import pytest

from pinashell.exceptions import LauncherFatalError
from pinashell.launcher import (
    EXEC_FAILED,
    LAUNCH_FAILED,
    CapturedOutput,
    ProcessLauncher,
    to_speakable,
)


@pytest.fixture
def launcher(speaker) -> ProcessLauncher:
    return ProcessLauncher(speaker, shell="/bin/sh", display=io.StringIO())


class TestToSpeakable:
    """Tests for speakable-form translation."""

    def test_whitespace_spelled_out(self) -> None:
        assert to_speakable("a b\tc\n", "stdout:") == "stdout: \na space b tab c newline "

    def test_consecutive_tabs(self) -> None:
        assert to_speakable("\t\t", "stderr:") == "stderr: \n tab  tab "

    def test_other_characters_unchanged(self) -> None:
        assert to_speakable("x=1;'q'", "stdout:") == "stdout: \nx=1;'q'"

    def test_empty_text(self) -> None:
        assert to_speakable("", "stdout:") == "stdout: \n"


class TestLaunchCapture:
    """Tests for launch() with capture through a real /bin/sh."""

    def test_echo_narrates_stdout(self, launcher, speaker) -> None:
        status = launcher.launch(["echo", "hi"], capture=True, command_line="echo hi")
        assert status == 0
        assert speaker.spoken == ["stdout: \nhi newline "]
        assert launcher.last_capture == CapturedOutput(stdout="hi\n", stderr="", returncode=0)

    def test_captured_output_is_displayed(self, launcher) -> None:
        launcher.launch(["echo", "hi"])
        assert launcher.display.getvalue() == "stdout:\nhi\n"

    def test_stderr_narrated_after_stdout(self, launcher, speaker) -> None:
        launcher.launch(["x"], command_line="echo out; echo err 1>&2")
        assert speaker.spoken == ["stdout: \nout newline ", "stderr: \nerr newline "]

    def test_line_passed_verbatim_to_shell(self, launcher, speaker) -> None:
        launcher.launch(["printf", "a b"], command_line='printf "%s" "a  b" | tr a-z A-Z')
        assert launcher.last_capture.stdout == "A  B"

    def test_tokens_joined_without_command_line(self, launcher) -> None:
        launcher.launch(["echo", "one", "two"])
        assert launcher.last_capture.stdout == "one two\n"

    def test_exit_status_returned(self, launcher) -> None:
        assert launcher.launch(["exit"], command_line="exit 3") == 3

    def test_killed_by_signal(self, launcher) -> None:
        assert launcher.launch(["kill"], command_line="kill -9 $$") == -9

    def test_large_stderr_does_not_block(self, launcher) -> None:
        launcher.launch(["x"], command_line="head -c 200000 /dev/zero | tr '\\0' e 1>&2; echo done")
        assert launcher.last_capture.stdout == "done\n"
        assert len(launcher.last_capture.stderr) == 200000

    def test_no_tokens_spawns_nothing(self, launcher, speaker, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail(*args, **kwargs):
            raise AssertionError("Popen should not be called")

        monkeypatch.setattr(subprocess, "Popen", fail)
        assert launcher.launch([]) == 0
        assert speaker.spoken == []


class TestLaunchWithoutCapture:
    """Tests for launch() with capture disabled."""

    def test_waits_and_stays_silent(self, launcher, speaker) -> None:
        assert launcher.launch(["true"], capture=False) == 0
        assert speaker.spoken == []
        assert launcher.last_capture is None


class TestLaunchFailures:
    """Tests for spawn and exec failure handling."""

    def test_missing_interpreter_reported(self, speaker, capsys) -> None:
        launcher = ProcessLauncher(speaker, shell="/nonexistent/sh", display=io.StringIO())
        assert launcher.launch(["ls"]) == EXEC_FAILED
        assert "pina_shell: cannot execute /nonexistent/sh" in capsys.readouterr().err

    def test_pipe_failure_is_fatal(self, launcher, monkeypatch: pytest.MonkeyPatch) -> None:
        def no_descriptors(*args, **kwargs):
            raise OSError(errno.EMFILE, "Too many open files")

        monkeypatch.setattr(subprocess, "Popen", no_descriptors)
        with pytest.raises(LauncherFatalError):
            launcher.launch(["ls"])

    def test_fork_failure_is_reported(self, launcher, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        def no_fork(*args, **kwargs):
            raise OSError(errno.EAGAIN, "Resource temporarily unavailable")

        monkeypatch.setattr(subprocess, "Popen", no_fork)
        assert launcher.launch(["ls"]) == LAUNCH_FAILED
        assert "could not start command" in capsys.readouterr().err

    def test_interrupt_reaps_child(self, launcher, monkeypatch: pytest.MonkeyPatch) -> None:
        processes = []
        real_popen = subprocess.Popen

        class InterruptedPopen(real_popen):
            def communicate(self, *args, **kwargs):
                processes.append(self)
                raise KeyboardInterrupt

        monkeypatch.setattr(subprocess, "Popen", InterruptedPopen)
        with pytest.raises(KeyboardInterrupt):
            launcher.launch(["sleep"], command_line="sleep 5")
        assert processes[0].returncode is not None
