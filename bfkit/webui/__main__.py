from __future__ import annotations

import argparse
from typing import Optional

import uvicorn

APP_FACTORY = "bfkit.webui.app:create_app"


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="bfkit-web", description="Serve the bfkit HTTP API")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on (default: 8000)")
    parser.add_argument("--reload", action="store_true", help="Restart on source changes (development only)")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
        help="uvicorn log level (default: info)",
    )
    args = parser.parse_args(argv)

    # Sessions live in memory, so a factory gives each worker its own store.
    uvicorn.run(
        APP_FACTORY,
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
