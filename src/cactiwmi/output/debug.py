"""Debug side channels: the console dump and the per-host verbose log."""

from pathlib import Path
from typing import IO, Iterable, List, Optional

from cactiwmi.errors import LogSinkUnavailable
from cactiwmi.query.models import QueryPlan, QueryRequest, RawArguments
from cactiwmi.query.sanitize import quote_condition_value
from cactiwmi.utils.logging import get_logger
from cactiwmi.utils.time import debug_log_timestamp

logger = get_logger(__name__)

RED = "\033[0;31m"
GREEN = "\033[0;32m"
RESET = "\033[0m"


def _field_line(label: str, raw: Optional[str], formatted: Optional[str], color: bool) -> str:
    raw = raw or ""
    formatted = formatted or ""
    if color:
        return f" {label} Raw: {RED}{raw}{RESET} Formatted: {GREEN}{formatted}{RESET}"
    return f" {label} Raw: {raw} Formatted: {formatted}"


def render_basic_dump(
    raw: RawArguments,
    request: QueryRequest,
    plan: QueryPlan,
    exit_status: int,
    color: bool = True,
) -> str:
    """
    Render every input field as typed and as used, plus the exact command.
    
    Args:
        raw: Values as they arrived on the command line
        request: The normalized request
        plan: The planned invocation
        exit_status: Exit status the client returned
        color: Wrap raw values in red and formatted ones in green
        
    Returns:
        Multi-line dump, ending in a blank line
    """
    condition_value = request.condition_value
    if condition_value is not None:
        condition_value = quote_condition_value(condition_value)
    
    lines: List[str] = [
        "",
        _field_line("Hostname", raw.host, request.host, color),
        _field_line("Credential", raw.credential_path, request.credential_path, color),
        _field_line("WMI Class", raw.class_name, request.class_name, color),
        _field_line("Columns", raw.columns, request.columns, color),
        _field_line("NameSpace", raw.namespace, plan.namespace, color),
        _field_line("Condition Key", raw.condition_key, request.condition_key, color),
        _field_line("Condition Value", raw.condition_value, condition_value, color),
        "",
        plan.command_line,
        f"Exec Status: {exit_status}",
        "",
        "",
    ]
    return "\n".join(lines)


def _log_file_name(host: str) -> str:
    """Per-host file name; path separators in the host never leave the log directory."""
    return "dbug_" + host.replace("/", "_").replace("\\", "_") + ".log"


class DebugLogSink:
    """Append-only verbose record for one host, opened for a single run.
    
    Only `open()` raises. A write or close that fails afterwards is logged
    and the sink goes quiet, so the poller still gets its output.
    """
    
    def __init__(self, log_directory: str, host: str):
        self.path = Path(log_directory) / _log_file_name(host)
        self._fp: Optional[IO[str]] = None
        self.failed = False
    
    def open(self) -> "DebugLogSink":
        try:
            self._fp = self.path.open("a", encoding="utf-8")
        except OSError as e:
            raise LogSinkUnavailable(f"Unable to open log file {self.path}: {e}") from e
        return self
    
    def close(self) -> None:
        fp, self._fp = self._fp, None
        if fp is None:
            return
        try:
            fp.close()
        except OSError as e:
            self.failed = True
            logger.warning(f"Debug log {self.path} could not be flushed: {e}")
    
    def __enter__(self) -> "DebugLogSink":
        return self.open()
    
    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
    
    def _write(self, text: str) -> None:
        if self.failed:
            return
        if self._fp is None:
            raise RuntimeError("Debug log is not open")
        try:
            self._fp.write(text)
        except OSError as e:
            logger.warning(f"Debug log {self.path} write failed, skipping further records: {e}")
            self.failed = True
            self.close()
    
    def write_header(self, request: QueryRequest, plan: QueryPlan, timestamp: Optional[str] = None) -> None:
        """Write the request fields, query and command line."""
        condition_value = request.condition_value
        if condition_value is not None:
            condition_value = quote_condition_value(condition_value)
        self._write(
            f"Time: {timestamp or debug_log_timestamp()}\n"
            f"WMI Class: {request.class_name}\n"
            f"Credential: {request.credential_path}\n"
            f"Columns: {request.columns}\n"
            f"Condition Key: {request.condition_key or ''}\n"
            f"Condition Val: {condition_value or ''}\n"
            f"Query: {plan.query}\n"
            f"Exec: {plan.command_line}\n"
            "Output:\n"
        )
    
    def write_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self._write(f"{line}\n")
    
    def write_output(self, text: str) -> None:
        self._write(f"Output to Cacti: {text}\n\n\n")
