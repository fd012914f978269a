#!/usr/bin/env python3
"""
ChipSim - Server Startup Script

Usage:
    python run.py [--host HOST] [--port PORT] [--reload] [--config PATH]
"""

import argparse
import os

import uvicorn

from chipsim.config import Config


def main():
    parser = argparse.ArgumentParser(description="ChipSim Server")
    parser.add_argument("--config", default=None, help="Path to a chipsim.toml file")
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    args = parser.parse_args()

    if args.config:
        # The app factory runs in the server process and reads this
        os.environ["CHIPSIM_CONFIG"] = args.config
    config = Config.load(args.config)

    uvicorn.run(
        "chipsim.server.app:create_app",
        factory=True,
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
