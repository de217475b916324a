"""The wmi client capability and its subprocess implementation."""

import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from cactiwmi.config.loader import AdapterConfig
from cactiwmi.errors import ClientUnavailable
from cactiwmi.utils.logging import get_logger

logger = get_logger(__name__)

MISSING_CLIENT_MESSAGE = "You must install the wmi client to use this script."


class ClientResult(BaseModel):
    """Raw wmic output: stdout lines and exit status."""
    
    lines: List[str] = Field(default_factory=list, description="stdout lines, trailing whitespace removed")
    exit_status: int = Field(default=0, description="Process exit status")


class WmiClient(ABC):
    """Anything that can run a wmic argv and hand back its output."""
    
    @abstractmethod
    def invoke(self, argv: Sequence[str]) -> ClientResult:
        """
        Run the client.
        
        Args:
            argv: Full argument vector, binary first
            
        Returns:
            ClientResult with stdout lines and exit status
        """
        pass


class SubprocessWmiClient(WmiClient):
    """Runs wmic as a child process, discarding stderr."""
    
    def __init__(self, timeout_seconds: Optional[float] = None):
        self.timeout_seconds = timeout_seconds
    
    def invoke(self, argv: Sequence[str]) -> ClientResult:
        logger.debug(f"Running {argv[0]} against {argv[3] if len(argv) > 3 else '?'}")
        try:
            proc = subprocess.run(
                list(argv),
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                errors="replace",
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as e:
            raise ClientUnavailable(MISSING_CLIENT_MESSAGE) from e
        except PermissionError as e:
            raise ClientUnavailable(f"wmi client is not executable: {argv[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise ClientUnavailable(f"wmi client timed out after {self.timeout_seconds}s") from e
        
        lines = [line.rstrip() for line in proc.stdout.splitlines()]
        return ClientResult(lines=lines, exit_status=proc.returncode)


def resolve_wmic_binary(config: Optional[AdapterConfig] = None) -> str:
    """
    Locate the wmic executable.
    
    Uses the configured path when set, otherwise searches PATH.
    
    Raises:
        ClientUnavailable: If no wmic binary can be found
    """
    config = config or AdapterConfig()
    if config.wmic_path:
        return config.wmic_path
    found = shutil.which("wmic")
    if not found:
        raise ClientUnavailable(MISSING_CLIENT_MESSAGE)
    return found
