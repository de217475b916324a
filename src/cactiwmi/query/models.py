"""Pydantic models for query requests and plans."""

from enum import IntEnum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

NAMESPACE_SEPARATOR = "\\"
DEFAULT_NAMESPACE: Tuple[str, ...] = ("root", "CIMV2")


class DebugLevel(IntEnum):
    """How much detail a run reports besides the flattened output."""
    
    NONE = 0
    BASIC = 1
    VERBOSE = 2
    
    @classmethod
    def parse(cls, value: Any) -> "DebugLevel":
        """Map 0/1/2 (or none/basic/verbose) to a level; anything else is NONE."""
        if isinstance(value, cls):
            return value
        if value is None or isinstance(value, bool):
            return cls.NONE
        text = str(value).strip().lower()
        for level in cls:
            if text in (str(level.value), level.name.lower()):
                return level
        return cls.NONE


class QueryRequest(BaseModel):
    """Normalized input for one wmic query."""
    
    model_config = ConfigDict(frozen=True)
    
    host: str = Field(..., min_length=1, description="Target host for the query")
    credential_path: str = Field(..., min_length=1, description="Authentication file handed to wmic unread")
    class_name: str = Field(..., min_length=1, description="WMI class, e.g. Win32_ComputerSystem")
    namespace: Tuple[str, ...] = Field(default=DEFAULT_NAMESPACE, description="Namespace path segments")
    columns: str = Field(default="*", description="Columns to select")
    condition_key: Optional[str] = Field(default=None, description="Filter key, only used with condition_value")
    condition_value: Optional[str] = Field(default=None, description="Filter value, only used with condition_key")
    
    @field_validator("namespace", mode="before")
    @classmethod
    def _split_namespace(cls, value: Any) -> Tuple[str, ...]:
        if value is None:
            return DEFAULT_NAMESPACE
        if isinstance(value, str):
            value = [value]
        segments: List[str] = []
        for part in value:
            segments.extend(s for s in str(part).split(NAMESPACE_SEPARATOR) if s)
        return tuple(segments) or DEFAULT_NAMESPACE
    
    @field_validator("columns", mode="before")
    @classmethod
    def _default_columns(cls, value: Any) -> str:
        return value or "*"
    
    @model_validator(mode="before")
    @classmethod
    def _filter_all_or_nothing(cls, data: Any) -> Any:
        # Half a filter means no filter.
        if isinstance(data, dict) and not (data.get("condition_key") and data.get("condition_value")):
            data = {**data, "condition_key": None, "condition_value": None}
        return data
    
    @property
    def namespace_path(self) -> str:
        return NAMESPACE_SEPARATOR.join(self.namespace)
    
    @property
    def has_filter(self) -> bool:
        return self.condition_key is not None


class QueryPlan(BaseModel):
    """Everything needed to invoke wmic for one request."""
    
    namespace: str = Field(..., description="Backslash-separated namespace path")
    query: str = Field(..., description="WQL query string, unquoted")
    argv: List[str] = Field(..., description="Argument vector handed to the client")
    command_line: str = Field(..., description="Shell rendering of argv for debug output")


class RawArguments(BaseModel):
    """Command line values as typed, shown next to their formatted form in debug output."""
    
    host: Optional[str] = None
    credential_path: Optional[str] = None
    class_name: Optional[str] = None
    columns: Optional[str] = None
    namespace: Optional[str] = None
    condition_key: Optional[str] = None
    condition_value: Optional[str] = None
