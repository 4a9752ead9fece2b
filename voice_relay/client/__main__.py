"""Command-line smoke test against a running relay server."""

from __future__ import annotations

import sys
import asyncio
import logging
import argparse

import orjson

from .smoke import ws_url, run_session, check_server, http_base_url


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Voice relay smoke client")
    parser.add_argument("--server", default="localhost:3000", help="host:port or ws://host:port or full URL")
    parser.add_argument("--secure", action="store_true", help="Use WSS/HTTPS")
    parser.add_argument("--path", default="/", help="WebSocket endpoint path")
    parser.add_argument("--audio-ms", type=int, default=0, help="Milliseconds of silence to stream after start")
    parser.add_argument("--skip-session", action="store_true", help="Only check the HTTP endpoints")
    parser.add_argument("--debug", action="store_true", help="Log every received message type")
    return parser.parse_args()


async def run(args: argparse.Namespace) -> int:
    server_info = await check_server(http_base_url(args.server, args.secure))
    print(orjson.dumps(server_info, option=orjson.OPT_INDENT_2).decode("utf-8"))
    if args.skip_session:
        return 0

    try:
        result = await run_session(ws_url(args.server, args.secure, args.path), audio_ms=args.audio_ms)
    except (RuntimeError, TimeoutError) as exc:
        print(f"session failed: {exc}", file=sys.stderr)
        return 1
    print(orjson.dumps(result, option=orjson.OPT_INDENT_2).decode("utf-8"))
    return 0


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING, format="%(levelname)s: %(message)s")
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
