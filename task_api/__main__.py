"""Entry point: python -m task_api [--port 8787]."""

import argparse
import logging

import uvicorn

from task_api.config import DEFAULT_PORT

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
)


def main() -> None:
    """Run the uvicorn server."""
    parser = argparse.ArgumentParser(description="task-api server")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Port (default: {DEFAULT_PORT})")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Host (default: 127.0.0.1)")
    parser.add_argument("--reload", action="store_true", help="Reload on source changes")
    args = parser.parse_args()

    uvicorn.run("task_api.main:app", host=args.host, port=args.port, reload=args.reload)


main()
