"""
serve.py — Run the API with uvicorn.

Example:
    python scripts/serve.py
    python scripts/serve.py --port 8000 --reload
"""

from __future__ import annotations

import argparse

import uvicorn

from app.core.config import settings


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Run the Neighborhood users API")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help=f"Port (default: {settings.PORT}, from PORT)",
    )
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")

    args = parser.parse_args()
    uvicorn.run("app.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
