#!/usr/bin/env python3
"""
Run the Prebid Edge auction server.

Usage:
    python run_server.py
    python run_server.py --config config/pbs.yaml --port 8080
    python run_server.py --no-debug
"""

import argparse
import dataclasses
import sys

from prebid_edge.config import ServerSettings
from prebid_edge.errors import ConfigError
from prebid_edge.server import run_server


def main():
    parser = argparse.ArgumentParser(description="Run Prebid Edge auction server")
    parser.add_argument("--config", help="Path to the PBS YAML config")
    parser.add_argument("--bidder", help="Adapter to build (default: smartadserver)")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=7676, help="Port to run on")
    parser.add_argument("--no-debug", action="store_true", help="Disable debug mode")
    args = parser.parse_args()

    settings = ServerSettings.from_env()
    overrides = {}
    if args.config:
        overrides["config_path"] = args.config
    if args.bidder:
        overrides["bidder"] = args.bidder
    settings = dataclasses.replace(settings, **overrides)

    try:
        run_server(host=args.host, port=args.port, debug=not args.no_debug, settings=settings)
    except ConfigError as e:
        print(f"Error: {e}")
        print("\nThe adapter could not be built; refusing to accept traffic.")
        sys.exit(1)


if __name__ == "__main__":
    main()
