"""Build the wmic namespace path, WQL query and argument vector."""

import shlex
from typing import Optional

from cactiwmi.config.loader import AdapterConfig
from cactiwmi.query.models import NAMESPACE_SEPARATOR, QueryPlan, QueryRequest
from cactiwmi.query.sanitize import (
    quote_condition_value,
    sanitize_condition,
    strip_trim_chars,
)
from cactiwmi.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_NAMESPACE_PATH = "root\\CIMV2"
NAMESPACE_ROOT = "root"


def normalize_namespace(
    raw: Optional[str],
    default: str = DEFAULT_NAMESPACE_PATH,
    root: str = NAMESPACE_ROOT,
) -> str:
    """
    Collapse a user-supplied namespace into a clean backslash path.
    
    Repeated or escaped separators are folded away and the path is anchored
    at the namespace root. A leading root segment in any case (`ROOT`) is
    rewritten to the root as given. Never fails: unusable input yields the
    default.
    
    Args:
        raw: Namespace as typed (may be None or empty)
        default: Path returned when nothing usable is given
        root: Leading segment every path must start with
        
    Returns:
        Namespace path, e.g. 'root\\CIMV2'
    """
    if raw is None:
        return default
    segments = [s for s in strip_trim_chars(raw).split(NAMESPACE_SEPARATOR) if s]
    if not segments:
        return default
    if segments[0].lower() == root.lower():
        segments[0] = root
    else:
        segments.insert(0, root)
    return NAMESPACE_SEPARATOR.join(segments)


def build_query(
    class_name: str,
    columns: Optional[str] = "*",
    condition_key: Optional[str] = None,
    condition_value: Optional[str] = None,
) -> str:
    """
    Assemble the WQL SELECT statement.
    
    The WHERE clause is all-or-nothing: it is added only when both the key
    and the value survive sanitization. A lone key or value is dropped
    silently rather than rejected.
    """
    columns = strip_trim_chars(columns or "") or "*"
    query = f"SELECT {columns} FROM {class_name}"
    
    key = sanitize_condition(condition_key)
    value = sanitize_condition(condition_value)
    if key and value:
        query = f"{query} WHERE {key}={quote_condition_value(value)}"
    elif key or value:
        logger.debug(f"Ignoring partial filter (key={key!r}, value={value!r})")
    return query


def quote_query(query: str) -> str:
    """Wrap a query so a shell passes it to wmic as a single argument."""
    return shlex.quote(query)


def build_request(
    host: str,
    credential_path: str,
    class_name: str,
    namespace: Optional[str] = None,
    columns: Optional[str] = None,
    condition_key: Optional[str] = None,
    condition_value: Optional[str] = None,
    config: Optional[AdapterConfig] = None,
) -> QueryRequest:
    """
    Normalize raw command line values into a QueryRequest.
    
    Raises:
        ValueError: If host, credential path or class is empty after scrubbing
    """
    config = config or AdapterConfig()
    namespace_path = normalize_namespace(
        namespace,
        default=config.default_namespace,
        root=config.namespace_root,
    )
    return QueryRequest(
        host=strip_trim_chars(host or ""),
        credential_path=strip_trim_chars(credential_path or ""),
        class_name=strip_trim_chars(class_name or ""),
        namespace=namespace_path,
        columns=strip_trim_chars(columns or ""),
        condition_key=sanitize_condition(condition_key),
        condition_value=sanitize_condition(condition_value),
    )


def plan_query(request: QueryRequest, wmic_path: str) -> QueryPlan:
    """Turn a request into the argv handed to the wmi client."""
    query = build_query(
        request.class_name,
        request.columns,
        request.condition_key,
        request.condition_value,
    )
    namespace = request.namespace_path
    argv = [
        wmic_path,
        f"--namespace={namespace}",
        f"--authentication-file={request.credential_path}",
        f"//{request.host}",
        query,
    ]
    command_line = " ".join(shlex.quote(arg) for arg in argv[:-1])
    command_line = f"{command_line} {quote_query(query)} 2>/dev/null"
    return QueryPlan(namespace=namespace, query=query, argv=argv, command_line=command_line)
