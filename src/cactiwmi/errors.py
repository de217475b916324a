"""Error taxonomy for a single poll run.

Every error that ends a run carries the exit code the poller should see.
Input irregularities (half a filter, empty namespace, ragged rows) are not
errors; they fall back to defaults in the builder and flattener.
"""

from typing import List, Optional


class AdapterError(RuntimeError):
    """Base class for errors that terminate a poll run."""
    
    exit_code: int = 1
    
    def render(self) -> str:
        """Text written to stdout for the poller."""
        return str(self)


class InvocationFailure(AdapterError):
    """The wmi client returned a non-zero exit status."""
    
    def __init__(self, exit_status: int, lines: Optional[List[str]] = None):
        self.exit_status = exit_status
        self.lines = list(lines or [])
        self.exit_code = exit_status
        super().__init__(f"wmi client exited with status {exit_status}")
    
    def render(self) -> str:
        return "WMI Client Output: " + "\n".join(self.lines)


class MalformedOutput(AdapterError):
    """The client succeeded but printed no `CLASS: ` marker line."""
    
    exit_code = 1
    
    def __init__(self, lines: Optional[List[str]] = None):
        self.lines = list(lines or [])
        super().__init__("WMI Class Chomp Failed!")
    
    def render(self) -> str:
        return "WMI Class Chomp Failed!\nWMI Client Output: " + "\n".join(self.lines)


class ClientUnavailable(AdapterError):
    """The wmi client binary is missing, not executable, or timed out."""
    
    exit_code = 1


class LogSinkUnavailable(AdapterError):
    """The verbose debug log could not be opened for append.

    Recovered by the runner; never reaches the poller.
    """


class ConfigError(ValueError):
    """Configuration file is present but invalid."""
