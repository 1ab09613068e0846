"""Exception types shared across pinashell modules."""


class PinaShellError(Exception):
    """Base class for pinashell errors."""


class SpeechEngineError(PinaShellError):
    """The speech engine could not be started and failures are configured as fatal."""


class LauncherFatalError(PinaShellError):
    """Pipes for capturing child output could not be created."""
