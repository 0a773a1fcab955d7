"""Command-line interface for the Plant Shop server."""

import argparse
import asyncio
import sys


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Plant Shop Server - browse the Green Earth plant catalog and keep a cart"
    )
    parser.add_argument(
        "--mode",
        choices=["stdio", "http"],
        default="http",
        help="Server mode: stdio (for MCP clients) or http (storefront page)",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="HTTP server host (only for http mode, default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP server port (only for http mode, default: 8000)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable hot reloading (only for http mode)",
    )

    args = parser.parse_args()

    if args.mode == "stdio":
        # Run MCP server via stdio
        from .server import main as server_main

        try:
            asyncio.run(server_main())
        except KeyboardInterrupt:
            print("\nShutting down...", file=sys.stderr)
            sys.exit(0)
    else:
        from .http_server import run_http_server

        print(f"Starting Plant Shop HTTP Server on {args.host}:{args.port}", file=sys.stderr)
        run_http_server(host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
