"""One poll: build the query, run wmic, flatten, report."""

from typing import List, Optional

from pydantic import BaseModel, Field

from cactiwmi.config.loader import AdapterConfig
from cactiwmi.errors import AdapterError, LogSinkUnavailable
from cactiwmi.output.debug import DebugLogSink, render_basic_dump
from cactiwmi.parsing.flattener import flatten_output
from cactiwmi.query.builder import plan_query
from cactiwmi.query.models import DebugLevel, QueryRequest, RawArguments
from cactiwmi.retrieval.client import WmiClient
from cactiwmi.utils.logging import get_logger

logger = get_logger(__name__)

NON_ZERO_NOTICE = "\n\nReturn code non-zero, debug mode enabled!\n\n"


class RunOutcome(BaseModel):
    """What the poller gets back from one run."""
    
    exit_code: int = Field(..., description="Process exit status for the poller")
    output: str = Field(default="", description="Everything destined for stdout")
    debug_level: DebugLevel = Field(default=DebugLevel.NONE, description="Level in effect when the run ended")


def run_poll(
    request: QueryRequest,
    client: WmiClient,
    wmic_path: str,
    *,
    config: Optional[AdapterConfig] = None,
    debug_level: DebugLevel = DebugLevel.NONE,
    raw: Optional[RawArguments] = None,
    color: bool = True,
) -> RunOutcome:
    """
    Execute a single query and render the result.
    
    Args:
        request: Normalized query request
        client: Capability that runs wmic
        wmic_path: Binary placed first in argv
        config: Adapter settings (separator, log directory)
        debug_level: Requested debug level
        raw: Command line values as typed, for the basic dump
        color: Use ANSI colors in the basic dump
        
    Returns:
        RunOutcome with exit code and stdout text
        
    Raises:
        ClientUnavailable: If the client cannot be run at all
    """
    config = config or AdapterConfig()
    raw = raw or RawArguments()
    level = DebugLevel.parse(debug_level)
    chunks: List[str] = []
    
    plan = plan_query(request, wmic_path)
    logger.info(f"Querying {request.host}: {plan.query}")
    result = client.invoke(plan.argv)
    
    if result.exit_status != 0:
        level = DebugLevel.BASIC
        chunks.append(NON_ZERO_NOTICE)
    
    sink: Optional[DebugLogSink] = None
    if level == DebugLevel.VERBOSE:
        try:
            sink = DebugLogSink(config.log_directory, request.host).open()
        except LogSinkUnavailable as e:
            logger.warning(f"{e}; falling back to basic debug output")
            level = DebugLevel.BASIC
    
    try:
        if sink is not None:
            sink.write_header(request, plan)
        
        if level == DebugLevel.BASIC:
            chunks.append(render_basic_dump(raw, request, plan, result.exit_status, color=color))
        
        try:
            flat = flatten_output(result, level, config.separator)
        except AdapterError as e:
            logger.error(f"Poll of {request.host} failed: {e}")
            if sink is not None:
                sink.write_lines(result.lines)
            chunks.append(f"{e.render()}\n")
            return RunOutcome(exit_code=e.exit_code, output="".join(chunks), debug_level=level)
        
        if sink is not None:
            sink.write_lines(flat.table.row_lines)
            sink.write_output(flat.text)
    finally:
        if sink is not None:
            sink.close()
    
    chunks.append(flat.text)
    return RunOutcome(exit_code=0, output="".join(chunks), debug_level=level)
