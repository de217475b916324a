"""Flatten wmic's pipe-delimited table into key:value pairs for the poller.

wmic prints a `CLASS: <name>` marker, a `|`-separated header line and one
`|`-separated line per instance. Anything printed before the marker is
noise (library warnings, NTSTATUS chatter) and is dropped.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from cactiwmi.errors import InvocationFailure, MalformedOutput
from cactiwmi.query.models import DebugLevel
from cactiwmi.query.sanitize import encode_legacy_spaces
from cactiwmi.retrieval.client import ClientResult
from cactiwmi.utils.logging import get_logger

logger = get_logger(__name__)

MARKER_PREFIX = "CLASS: "
COLUMN_DELIMITER = "|"
HEADER_INDEX = 1
FIRST_ROW_INDEX = 2


class ParsedTable(BaseModel):
    """Header and data rows found after the marker line."""
    
    header: List[str] = Field(default_factory=list)
    rows: List[List[str]] = Field(default_factory=list)
    row_lines: List[str] = Field(default_factory=list, description="Data lines exactly as wmic printed them")
    
    @property
    def multi_row(self) -> bool:
        return len(self.rows) > 1


class FlattenedEntry(BaseModel):
    """One column value from one row."""
    
    key: str
    value: str
    
    def render(self) -> str:
        return f"{self.key}:{self.value}"


class FlattenResult(BaseModel):
    """Parsed table, its entries and the text handed to the poller."""
    
    table: ParsedTable
    entries: List[FlattenedEntry]
    text: str


def check_exit_status(result: ClientResult) -> None:
    """Raise InvocationFailure for a non-zero client exit status."""
    if result.exit_status != 0:
        raise InvocationFailure(result.exit_status, result.lines)


def find_marker(lines: List[str]) -> Optional[int]:
    """Index of the first line starting with the marker, or None."""
    for index, line in enumerate(lines):
        if line.startswith(MARKER_PREFIX):
            return index
    return None


def parse_table(lines: List[str]) -> ParsedTable:
    """
    Locate the marker and split the table that follows it.
    
    After trimming, index 0 is the marker line itself, index 1 is the
    header and data rows start at index 2.
    
    Raises:
        MalformedOutput: If no marker line is present
    """
    marker = find_marker(lines)
    if marker is None:
        raise MalformedOutput(lines)
    
    trimmed = lines[marker:]
    if marker:
        logger.debug(f"Discarded {marker} line(s) before the class marker")
    if len(trimmed) <= HEADER_INDEX:
        return ParsedTable()
    
    header = trimmed[HEADER_INDEX].split(COLUMN_DELIMITER)
    row_lines = trimmed[FIRST_ROW_INDEX:]
    rows = [line.split(COLUMN_DELIMITER) for line in row_lines]
    return ParsedTable(header=header, rows=rows, row_lines=row_lines)


def flatten_table(table: ParsedTable) -> List[FlattenedEntry]:
    """
    Pair each cell with its column name.
    
    Keys get a zero-based row suffix only when there is more than one row,
    so single-instance classes keep their plain metric names. Cells beyond
    the header width are ignored.
    """
    entries: List[FlattenedEntry] = []
    for row_index, cells in enumerate(table.rows):
        suffix = str(row_index) if table.multi_row else ""
        if len(cells) > len(table.header):
            logger.debug(f"Row {row_index} has {len(cells)} cells for {len(table.header)} columns; extra cells ignored")
        for name, cell in zip(table.header, cells):
            entries.append(FlattenedEntry(key=f"{name}{suffix}", value=encode_legacy_spaces(cell)))
    return entries


def render_entries(
    entries: List[FlattenedEntry],
    debug_level: DebugLevel = DebugLevel.NONE,
    separator: str = " ",
) -> str:
    """
    Join entries for output.
    
    Basic debug puts each entry on its own newline-terminated line. Every
    other level joins with the separator and leaves no trailing separator.
    """
    if debug_level == DebugLevel.BASIC:
        return "".join(f"{entry.render()}\n" for entry in entries)
    return separator.join(entry.render() for entry in entries)


def flatten_output(
    result: ClientResult,
    debug_level: DebugLevel = DebugLevel.NONE,
    separator: str = " ",
) -> FlattenResult:
    """
    Run the full check, parse, flatten and render sequence.
    
    Raises:
        InvocationFailure: If the client exited non-zero
        MalformedOutput: If the output has no marker line
    """
    check_exit_status(result)
    table = parse_table(result.lines)
    entries = flatten_table(table)
    text = render_entries(entries, debug_level, separator)
    return FlattenResult(table=table, entries=entries, text=text)
