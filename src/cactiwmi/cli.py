"""CLI entrypoint for the Cacti WMI poller adapter."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from cactiwmi import __version__
from cactiwmi.config.loader import AdapterConfig, load_adapter_config
from cactiwmi.errors import AdapterError, ConfigError
from cactiwmi.query.builder import build_request
from cactiwmi.query.models import DebugLevel, QueryRequest, RawArguments
from cactiwmi.retrieval.client import SubprocessWmiClient, resolve_wmic_binary
from cactiwmi.runners.poll import run_poll
from cactiwmi.utils.logging import get_logger

logger = get_logger(__name__)

USAGE = (
    "cactiwmi -h <hostname> -u <credential path> -w <wmi class> [-n <namespace>] [-c <columns>]\n"
    "                [-k <filter key> -v <filter value>] [-d <debug level>] [--config CONFIG]"
)

HELP_EPILOG = """\
All special characters and spaces must be escaped or enclosed in single quotes!
Use + for spaces in filter keys and values.

Example: cactiwmi -h 10.0.0.1 -u /etc/wmi.pw -w Win32_ComputerSystem -c PrimaryOwnerName,NumberOfProcessors -n 'root\\CIMV2'

Legacy form: cactiwmi <host> <credential path> <wmi class> <columns> [<filter key> <filter value>]

Password file format: Plain text file with the following 3 lines replaced with your details.

    username=<your username>
    password=<your password>
    domain=<your domain> (can be WORKGROUP if not using a domain)
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser. -h is the hostname, so help is --help only."""
    parser = argparse.ArgumentParser(
        prog="cactiwmi",
        usage=USAGE,
        description=f"cactiwmi version {__version__}: query WMI via wmic and print key:value pairs for Cacti",
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("-h", dest="host", metavar="<hostname>", help="Hostname of the server to query. (required)")
    parser.add_argument("-u", dest="credential", metavar="<credential path>", help="Path to the credential file. (required)")
    parser.add_argument("-w", dest="wmi_class", metavar="<wmi class>", help="WMI Class to be used. (required)")
    parser.add_argument(
        "-n",
        dest="namespace",
        metavar="<namespace>",
        help="What namespace to use. (optional, defaults to root\\CIMV2)",
    )
    parser.add_argument("-c", dest="columns", metavar="<columns>", help="What columns to select. (optional, defaults to *)")
    parser.add_argument("-k", dest="filter_key", metavar="<filter key>", help="What key to filter on. (optional, default is no filter)")
    parser.add_argument(
        "-v",
        dest="filter_value",
        metavar="<filter value>",
        help="What value for the key. (required, only when using filter key)",
    )
    parser.add_argument(
        "-d",
        dest="debug",
        metavar="<debug level>",
        help="Debug level. (optional, default is none, levels are 1 & 2)",
    )
    parser.add_argument("--config", type=Path, help="Path to cactiwmi.config.yaml")
    parser.add_argument("--no-color", action="store_true", help="Plain text debug dump")
    parser.add_argument("--help", action="store_true", help="Show this help message and exit")
    parser.add_argument("--version", action="version", version=f"cactiwmi {__version__}")
    parser.add_argument("legacy", nargs="*", help=argparse.SUPPRESS)
    return parser


def raw_arguments_from(args: argparse.Namespace) -> Optional[RawArguments]:
    """
    Collect the query values from either calling convention.
    
    Flag arguments win; positional arguments are the legacy
    host/credential/class/columns[/key/value] order.
    
    Returns:
        RawArguments, or None when neither form supplied anything
    """
    if any(v is not None for v in (args.host, args.credential, args.wmi_class)):
        return RawArguments(
            host=args.host,
            credential_path=args.credential,
            class_name=args.wmi_class,
            columns=args.columns,
            namespace=args.namespace,
            condition_key=args.filter_key,
            condition_value=args.filter_value,
        )
    
    legacy = list(args.legacy or [])
    if len(legacy) < 3:
        return None
    legacy += [None] * (6 - len(legacy))
    host, credential, wmi_class, columns, key, value = legacy[:6]
    return RawArguments(
        host=host,
        credential_path=credential,
        class_name=wmi_class,
        columns=columns,
        condition_key=key,
        condition_value=value,
    )


def _request_from(raw: RawArguments, config: AdapterConfig) -> QueryRequest:
    return build_request(
        host=raw.host or "",
        credential_path=raw.credential_path or "",
        class_name=raw.class_name or "",
        namespace=raw.namespace,
        columns=raw.columns,
        condition_key=raw.condition_key,
        condition_value=raw.condition_value,
        config=config,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entrypoint. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    
    if args.help:
        parser.print_help()
        return 0
    
    raw = raw_arguments_from(args)
    if raw is None:
        parser.print_help()
        return 1
    
    try:
        config = load_adapter_config(args.config)
    except (FileNotFoundError, ConfigError) as e:
        logger.error(f"Configuration error: {e}")
        print(f"Error: {e}")
        return 1
    
    try:
        request = _request_from(raw, config)
    except ValueError as e:
        logger.debug(f"Rejected arguments: {e}")
        parser.print_help()
        return 1
    
    debug_level = DebugLevel.parse(args.debug if args.debug is not None else config.debug_level)
    
    try:
        wmic_path = resolve_wmic_binary(config)
        outcome = run_poll(
            request,
            SubprocessWmiClient(timeout_seconds=config.timeout_seconds),
            wmic_path,
            config=config,
            debug_level=debug_level,
            raw=raw,
            color=not args.no_color,
        )
    except AdapterError as e:
        logger.error(f"Error querying {request.host}: {e}")
        print(e.render())
        return e.exit_code
    
    print(outcome.output, end="")
    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
