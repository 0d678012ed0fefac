from __future__ import annotations

import argparse
import sys
from typing import List


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the Portside API server.

    Security notes:
    - If PORTSIDE_API_KEYS is set, gated requests must provide X-Portside-API-Key.
    - Bind to 127.0.0.1 by default (safer than 0.0.0.0).

    """

    try:
        import uvicorn
    except Exception as e:
        print(f"error: uvicorn is required to serve the API: {e}", file=sys.stderr)
        return 2

    from portside.api.server import create_app

    app = create_app()
    uvicorn.run(app, host=args.host, port=int(args.port), log_level=args.log_level)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="portside", description="Portside service tools")
    sub = parser.add_subparsers(dest="command", required=True)

    sv = sub.add_parser("serve", help="Run the Portside FastAPI server")
    sv.add_argument("--host", default="127.0.0.1")
    sv.add_argument("--port", default=8000, type=int)
    sv.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
    )
    sv.set_defaults(func=cmd_serve)

    return parser


def main(argv: List[str] | None = None) -> int:
    """CLI entry."""
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
