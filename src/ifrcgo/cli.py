"""Command line entry point: `ifrcgo-mcp`.

Settings come from IFRCGO_* environment variables (and .env); flags given
here override them for this process only.

Usage:
    ifrcgo-mcp                                  # stdio, for MCP clients
    ifrcgo-mcp --transport http --port 8080     # HTTP with CORS
    ifrcgo-mcp --list-tools                     # print the tool catalogue
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from ifrcgo import __version__
from ifrcgo.foundation.config import GoSettings, get_settings
from ifrcgo.runtime.observability import configure_logging, get_logger

log = get_logger("ifrcgo.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ifrcgo-mcp",
        description="MCP server exposing the IFRC GO humanitarian API as tools",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--transport", choices=["stdio", "http"], help="Transport (default: stdio)")
    parser.add_argument("--host", help="HTTP bind address")
    parser.add_argument("--port", type=int, help="HTTP port")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], type=str.upper)
    parser.add_argument("--log-format", choices=["console", "json", "none"])
    parser.add_argument("--list-tools", action="store_true", help="Print available tools and exit")
    return parser


def apply_overrides(settings: GoSettings, args: argparse.Namespace) -> GoSettings:
    """Copy of settings with command line flags applied."""
    server = settings.server.model_copy(update={
        k: v for k, v in {"transport": args.transport, "host": args.host, "port": args.port}.items() if v is not None
    })
    log_settings = settings.logging.model_copy(update={
        k: v for k, v in {"level": args.log_level, "format": args.log_format}.items() if v is not None
    })
    return settings.model_copy(update={"server": server, "logging": log_settings})


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    configure_logging(settings.logging.format, settings.logging.level)
    
    from ifrcgo.ext.mcp import create_server
    
    server = create_server(settings)
    if args.list_tools:
        print(server.registry.describe())
        return 0
    
    log.info("starting", version=__version__, transport=settings.server.transport,
             authenticated=settings.api.authenticated)
    try:
        if settings.server.transport == "http":
            server.run(host=settings.server.host, port=settings.server.port)
        else:
            server.run()
    except KeyboardInterrupt:
        log.info("interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
