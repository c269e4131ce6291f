"""Run the softlineup API under uvicorn.

Usage:
    python scripts/serve.py --port 8000

The database location comes from ``SOFTLINEUP_DB_PATH`` and a fixed engine
seed from ``SOFTLINEUP_SEED``.
"""

from __future__ import annotations

import argparse
import os

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the softlineup REST API")
    parser.add_argument("--host", default=os.getenv("SOFTLINEUP_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("SOFTLINEUP_PORT", "8000")))
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    uvicorn.run(
        "softlineup.api:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
